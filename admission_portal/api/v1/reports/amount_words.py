"""Rupee amounts in Hindi words for printed receipts (Indian grouping: सौ, हज़ार, लाख, करोड़)."""

EKAI = ["", "एक", "दो", "तीन", "चार", "पाँच", "छह", "सात", "आठ", "नौ"]
DAHAI = ["दस", "ग्यारह", "बारह", "तेरह", "चौदह", "पंद्रह", "सोलह", "सत्रह", "अठारह", "उन्नीस"]
TENS = ["", "", "बीस", "तीस", "चालीस", "पचास", "साठ", "सत्तर", "अस्सी", "नब्बे"]


def _below_thousand(n: int) -> str:
    words = []
    if n >= 100:
        words.append(EKAI[n // 100] + " सौ")
        n %= 100
    if n:
        if n < 10:
            words.append(EKAI[n])
        elif n < 20:
            words.append(DAHAI[n - 10])
        else:
            words.append(TENS[n // 10])
            if n % 10:
                words.append(EKAI[n % 10])
    return " ".join(words)


def _words(n: int) -> str:
    parts = []
    crore, n = divmod(n, 10_000_000)
    if crore:
        # Amounts past 999 crore keep counting in crore.
        parts.append(f"{_words(crore)} करोड़")
    lakh, n = divmod(n, 100_000)
    if lakh:
        parts.append(f"{_below_thousand(lakh)} लाख")
    thousand, n = divmod(n, 1_000)
    if thousand:
        parts.append(f"{_below_thousand(thousand)} हज़ार")
    if n:
        parts.append(_below_thousand(n))
    return " ".join(parts)


def to_words_hindi(num: int) -> str:
    """
    >>> to_words_hindi(1130)
    'रुपये एक हज़ार एक सौ तीस मात्र'
    """
    if num < 0:
        raise ValueError("amount must not be negative")
    if num == 0:
        return "शून्य"
    return f"रुपये {_words(num)} मात्र"
