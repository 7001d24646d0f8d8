"""
Closed-class word lists and concept tables shared by graph preparation, the structural
transitions and the realizers.
"""
from typing import Dict, FrozenSet

ARTICLES: FrozenSet[str] = frozenset(["a", "an", "the"])

PRONOUNS: FrozenSet[str] = frozenset(["i", "you", "he", "she", "it", "we", "they"])

POSSESSIVE_PRONOUNS: Dict[str, str] = {
    "i": "my",
    "you": "your",
    "he": "his",
    "she": "her",
    "it": "its",
    "we": "our",
    "they": "their",
}

PERSONAL_PRONOUNS: Dict[str, str] = {"i": "me", "he": "him", "we": "us", "they": "them"}

MONTHS: Dict[int, str] = {
    1: "january",
    2: "february",
    3: "march",
    4: "april",
    5: "may",
    6: "june",
    7: "july",
    8: "august",
    9: "september",
    10: "october",
    11: "november",
    12: "december",
}

ORDINALS: Dict[int, str] = {1: "first", 2: "second", 3: "third", 4: "fourth", 5: "fifth", 6: "sixth"}

# Concepts that never align to a word of their own.
NO_ALIGNMENT_CONCEPTS: FrozenSet[str] = frozenset(
    [
        "byline-91",
        "ordinal-entity",
        "temporal-quantity",
        "monetary-quantity",
        "mass-quantity",
        "multi-sentence",
        ":weekday",
        "date-entity",
    ]
)

ALWAYS_DELETE: FrozenSet[str] = frozenset(["multi-sentence"])

NEVER_DELETE: FrozenSet[str] = frozenset(["-", "+", "amr-unknown"])

MODES: FrozenSet[str] = frozenset(["interrogative", "imperative", "expressive"])

AMR_UNKNOWN = "amr-unknown"

MULTI_SENTENCE = "multi-sentence"

# Country, region and religion names mapped to their adjective forms.
COUNTRY_FORMS: Dict[str, str] = {
    "afghanistan": "afghan",
    "africa": "african",
    "albania": "albanian",
    "algeria": "algerian",
    "america": "american",
    "argentina": "argentine",
    "armenia": "armenian",
    "asia": "asian",
    "australia": "australian",
    "austria": "austrian",
    "azerbaijan": "azerbaijani",
    "bangladesh": "bangladeshi",
    "belarus": "belarusian",
    "belgium": "belgian",
    "bolivia": "bolivian",
    "brazil": "brazilian",
    "britain": "british",
    "bulgaria": "bulgarian",
    "burma": "burmese",
    "cambodia": "cambodian",
    "canada": "canadian",
    "chile": "chilean",
    "china": "chinese",
    "colombia": "colombian",
    "croatia": "croatian",
    "cuba": "cuban",
    "cyprus": "cypriot",
    "czech republic": "czech",
    "denmark": "danish",
    "east asia": "east asian",
    "egypt": "egyptian",
    "england": "english",
    "estonia": "estonian",
    "ethiopia": "ethiopian",
    "europe": "european",
    "european union": "european",
    "finland": "finnish",
    "france": "french",
    "georgia": "georgian",
    "germany": "german",
    "great britain": "british",
    "greece": "greek",
    "hungary": "hungarian",
    "iceland": "icelandic",
    "india": "indian",
    "indonesia": "indonesian",
    "iran": "iranian",
    "iraq": "iraqi",
    "ireland": "irish",
    "islam": "islamic",
    "islamism": "islamist",
    "israel": "israeli",
    "italy": "italian",
    "japan": "japanese",
    "jordan": "jordanian",
    "kashmir": "kashmiri",
    "kazakhstan": "kazakhstani",
    "kenya": "kenyan",
    "kurdistan": "kurdish",
    "kuwait": "kuwaiti",
    "latvia": "latvian",
    "lebanon": "lebanese",
    "libya": "libyan",
    "lithuania": "lithuanian",
    "malaysia": "malaysian",
    "mexico": "mexican",
    "mongolia": "mongolian",
    "morocco": "moroccan",
    "myanmar": "burmese",
    "nepal": "nepali",
    "netherlands": "dutch",
    "new zealand": "new zealand",
    "nigeria": "nigerian",
    "north africa": "north african",
    "north korea": "north korean",
    "norway": "norwegian",
    "pakistan": "pakistani",
    "palestine": "palestinian",
    "peru": "peruvian",
    "philippines": "filipino",
    "poland": "polish",
    "portugal": "portuguese",
    "romania": "romanian",
    "russia": "russian",
    "saudi arabia": "saudi",
    "scotland": "scots",
    "serbia": "serbian",
    "singapore": "singapore",
    "slovakia": "slovak",
    "somalia": "somali",
    "south africa": "south african",
    "south asia": "south asian",
    "south korea": "south korean",
    "southeast asia": "southeast asian",
    "soviet union": "soviet",
    "spain": "spanish",
    "sri lanka": "sri lankan",
    "sudan": "sudanese",
    "sweden": "swedish",
    "switzerland": "swiss",
    "syria": "syrian",
    "taiwan": "taiwanese",
    "tajikistan": "tajik",
    "thailand": "thai",
    "tunisia": "tunisian",
    "turkey": "turkish",
    "uganda": "ugandan",
    "ukraine": "ukrainian",
    "united arab emirates": "emirati",
    "united kingdom": "british",
    "united states": "american",
    "uzbekistan": "uzbekistani",
    "venezuela": "venezuelan",
    "vietnam": "vietnamese",
    "wales": "welsh",
    "west": "western",
    "yemen": "yemeni",
    "zimbabwe": "zimbabwean",
}
