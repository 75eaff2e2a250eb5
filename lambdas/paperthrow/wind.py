import hashlib


def derive_wind(token: str) -> dict:
    """Per-session wind vector, fixed for the life of the token.

    Bytes 0-2 of md5(token), each scaled by 1/255, give the x offset, the z
    offset and the strength. y is always 0.
    """
    seed = hashlib.md5(token.encode()).digest()
    r0, r1, r2 = (b / 255 for b in seed[:3])
    return {
        "x": (r0 - 0.5) * 0.4,
        "y": 0,
        "z": (r1 - 0.5) * 0.4,
        "strength": 0.8 + r2 * 0.8,
    }
