from sopsenv.constants import MASK_CHAR

# Number of characters left visible at each end of values longer than _SHORT_LIMIT.
_VISIBLE = 2
_SHORT_LIMIT = 4


def mask(value: str) -> str:
    """Returns a display-safe form of value that preserves its length and boundary characters.

    Values of up to four characters are masked entirely. Longer values keep their first two and last two characters.
    """
    if len(value) <= _SHORT_LIMIT:
        return MASK_CHAR * len(value)
    return value[:_VISIBLE] + MASK_CHAR * (len(value) - 2 * _VISIBLE) + value[-_VISIBLE:]
