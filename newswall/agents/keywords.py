"""Frequency-ranked keyword extraction (no external NLP)."""

from __future__ import annotations

import re
from collections import Counter
from typing import Iterable

STOPWORDS = frozenset(
    "a,about,above,after,again,against,all,am,an,and,any,are,aren't,as,at,be,because,been,"
    "before,being,below,between,both,but,by,can't,cannot,could,couldn't,did,didn't,do,does,"
    "doesn't,doing,don't,down,during,each,few,for,from,further,had,hadn't,has,hasn't,have,"
    "haven't,having,he,he'd,he'll,he's,her,here,here's,hers,herself,him,himself,his,how,how's,"
    "i,i'd,i'll,i'm,i've,if,in,into,is,isn't,it,it's,its,itself,let's,me,more,most,mustn't,my,"
    "myself,no,nor,not,of,off,on,once,only,or,other,ought,our,ours,ourselves,out,over,own,same,"
    "shan't,she,she'd,she'll,she's,should,shouldn't,so,some,such,than,that,that's,the,their,"
    "theirs,them,themselves,then,there,there's,these,they,they'd,they'll,they're,they've,this,"
    "those,through,to,too,under,until,up,very,was,wasn't,we,we'd,we'll,we're,we've,were,"
    "weren't,what,what's,when,when's,where,where's,which,while,who,who's,whom,why,why's,with,"
    "won't,would,wouldn't,you,you'd,you'll,you're,you've,your,yours,yourself,yourselves".split(",")
)

# Anything that isn't a letter, digit, whitespace or hyphen
_NON_WORD = re.compile(r"[^\w\s-]|_")


def extract_keywords(headlines: Iterable[str], min_length: int = 4, max_keywords: int = 10) -> list[str]:
    """Rank words across headlines by frequency.

    Args:
        headlines: Headline strings
        min_length: Shortest word kept
        max_keywords: Number of keywords returned

    Returns:
        Most frequent words, ties in first-seen order
    """
    freq: Counter[str] = Counter()
    for headline in headlines:
        for word in _NON_WORD.sub(" ", (headline or "").lower()).split():
            if len(word) < min_length or word in STOPWORDS:
                continue
            # de-pluralize simple case
            if word.endswith("s") and len(word) > 4:
                word = word[:-1]
            freq[word] += 1
    return [word for word, _ in freq.most_common(max_keywords)]
