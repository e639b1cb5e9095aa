# fashion_search/filters/vocabulary.py

"""Named lookup tables shared by the query fallback and the ranker.

Bump ``VOCABULARY_VERSION`` whenever a table changes so ranking and
fallback differences between runs can be traced in the logs.
"""

from dataclasses import dataclass, field

VOCABULARY_VERSION = "2024.2"

# Fashion terms that earn a small relevance bonus when present in a title.
FASHION_TERMS: tuple[str, ...] = (
    "shirt", "dress", "pant", "jean", "shoe", "bag", "jacket", "coat",
    "skirt", "top", "blouse", "sneaker", "boot", "handbag", "purse",
    "jewelry", "accessory", "fashion", "style", "wear", "clothing",
)

COLOR_TERMS: tuple[str, ...] = (
    "red", "blue", "green", "yellow", "black", "white", "pink",
    "purple", "orange", "brown", "gray", "grey", "navy", "maroon",
    "beige", "cream",
)

# Garment nouns grouped by category, each with the context tokens the
# fallback appends.  Order matters: the first matching category wins.
GARMENT_CATEGORIES: tuple[tuple[tuple[str, ...], str], ...] = (
    (("t-shirt", "tshirt", "shirt", "top", "blouse", "tee", "polo",
      "kurta", "hoodie", "sweater", "sweatshirt"),
     "clothing fashion casual wear"),
    (("pant", "jean", "trouser", "legging", "jogger", "chino"),
     "bottoms fashion casual wear"),
    (("dress", "gown", "frock", "saree", "lehenga"),
     "women fashion casual elegant"),
    (("shoe", "sneaker", "boot", "footwear", "sandal", "heel", "loafer"),
     "footwear fashion casual"),
    (("bag", "purse", "handbag", "backpack", "wallet", "clutch"),
     "accessories fashion"),
    (("jacket", "coat", "blazer", "cardigan"),
     "outerwear fashion casual formal"),
    (("skirt", "short"),
     "women fashion casual"),
    (("jewelry", "jewellery", "necklace", "earring", "ring", "bracelet",
      "accessory", "watch"),
     "accessories fashion jewelry"),
)

# Seasonal / occasion words expanded to a canned multi-garment query.
SEASONAL_EXPANSIONS: dict[str, str] = {
    "summer": "summer dress t-shirt shorts linen shirt sandals",
    "winter": "winter jacket sweater hoodie coat boots",
    "monsoon": "monsoon raincoat quick dry t-shirt waterproof shoes",
    "party": "party wear dress blazer shirt heels clutch",
    "wedding": "wedding ethnic wear sherwani lehenga saree kurta",
    "festive": "festive ethnic wear kurta saree lehenga",
    "office": "office formal shirt trousers blazer formal shoes",
    "formal": "formal shirt trousers suit blazer oxford shoes",
    "beach": "beach wear shorts swimwear kaftan flip flops",
    "weekend": "weekend casual t-shirt jeans sneakers",
    "casual": "casual t-shirt jeans sneakers shirt",
    "gym": "gym activewear track pants sports t-shirt running shoes",
}

# Substrings of an image URL hinting at what the picture shows.
URL_HINTS: tuple[tuple[tuple[str, ...], str], ...] = (
    (("shirt", "top", "tee"), "shirt top clothing"),
    (("dress", "gown"), "dress women fashion"),
    (("pant", "jean"), "pants jeans bottoms"),
    (("shoe", "sneaker", "boot"), "shoes footwear"),
    (("bag", "purse", "handbag"), "bag accessories"),
    (("jacket", "coat"), "jacket coat outerwear"),
)

# Phrases that mark an AI response as a refusal or a hedge.
REFUSAL_PHRASES: tuple[str, ...] = (
    "cannot",
    "can't",
    "unable to",
    "sorry",
    "i don't see",
    "i do not see",
    "i don't understand",
    "no clothing",
    "no fashion",
    "no shopping query",
    "as an ai",
    "error",
)

TRENDING_STOPWORDS: frozenset[str] = frozenset(
    (
        "a,an,the,and,or,of,in,on,for,with,to,from,by,is,are,was,were,"
        "be,as,at,that,this,these,those,men,man,women,woman,unisex,kids,"
        "boys,girls,new,latest,online,shop,shopping,buy,style,styles,"
        "trend,trending,popular,best,seller,sellers,collection,"
        "collections,2024,2025"
    ).split(",")
)


@dataclass(frozen=True)
class Vocabulary:
    """Bundle of lookup tables injected into fallback and ranking code."""

    fashion_terms: tuple[str, ...] = FASHION_TERMS
    color_terms: tuple[str, ...] = COLOR_TERMS
    garment_categories: tuple[tuple[tuple[str, ...], str], ...] = (
        GARMENT_CATEGORIES
    )
    seasonal_expansions: dict[str, str] = field(
        default_factory=lambda: dict(SEASONAL_EXPANSIONS)
    )
    url_hints: tuple[tuple[tuple[str, ...], str], ...] = URL_HINTS
    refusal_phrases: tuple[str, ...] = REFUSAL_PHRASES
    stopwords: frozenset[str] = TRENDING_STOPWORDS
    version: str = VOCABULARY_VERSION


DEFAULT_VOCABULARY = Vocabulary()
