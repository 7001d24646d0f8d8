"""
Simplification of Penn Treebank part-of-speech tags to the coarse tag set the realizers
work with.
"""
from typing import Dict, List, Optional

# Assigned when no unique tag can be determined.
POS_ANY = "-*-"

_SIMPLIFIED_TAGS: Dict[str, List[str]] = {
    "NN": ["NN", "NNS", "NNP", "NNPS", "FW"],
    "VB": ["VB", "VBD", "VBP", "VBZ"],
    "VBN": ["VBN"],
    "VBG": ["VBG"],
    "JJ": ["JJ", "JJR", "JJS", "WRB", "RB", "RBR", "RBS"],
}

POS_CATEGORIES: List[str] = list(_SIMPLIFIED_TAGS.keys()) + [POS_ANY]


def simplify_pos(pos: Optional[str], propbank_entry: bool) -> Optional[str]:
    """
    Maps a treebank tag to its simplified form.  Tags outside the simplified set become
    `POS_ANY` for PropBank framesets and are returned unchanged otherwise.
    """
    for simplified, tags in _SIMPLIFIED_TAGS.items():
        if pos in tags:
            return simplified
    if propbank_entry:
        return POS_ANY
    return pos
