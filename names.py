# Name rules shared by every operation on the tree

CD = "."
PARENT = ".."
ROOT = "/"

RESERVED = (CD, PARENT, ROOT)

# Categories returned by classify()
RESERVED_TOKEN = "reserved"
INVALID = "invalid"
PLAIN = "plain"


def is_reserved(name):
    """True for `.`, `..` and `/`: fine as navigation arguments, never as names."""
    return name in RESERVED


def is_invalid(name):
    return len(name) == 0 or ROOT in name


def classify(name):
    # Reserved is checked first, "/" is both reserved and contains a slash
    if( is_reserved(name) ):
        return RESERVED_TOKEN
    if( is_invalid(name) ):
        return INVALID
    return PLAIN
