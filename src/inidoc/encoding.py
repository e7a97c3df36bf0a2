from collections.abc import Iterable

import chardet

DEFAULT_ENCODING = "utf-8"


def detect_encoding(file: Iterable[bytes]) -> str | None:
    """Determine the encoding of a binary file.

    Args:
        file: The file to detect the encoding of, or any other iterable of byte lines.

    Returns:
        The encoding if detected successfully, otherwise None.
    """

    detector = chardet.UniversalDetector()

    for line in file:
        detector.feed(line)
        if detector.done:
            break

    result = detector.close()

    if encoding := result["encoding"]:
        encoding = encoding.lower()

        if encoding == "ascii":
            # Pure ASCII files are valid UTF-8, which lets non-ASCII text be written back later.
            encoding = DEFAULT_ENCODING

        return encoding

    return None
