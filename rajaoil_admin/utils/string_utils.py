import re
import unicodedata


def normalize_string(value: str) -> str:
    """
    Normalizes a string for comparisons:
    - lowercases
    - strips accents
    - keeps only alphanumeric characters (a-z0-9)
    Example: 'Raja Gold-Oil' -> 'rajagoldoil'
    """
    if value is None:
        return ""
    s = str(value)
    s = unicodedata.normalize('NFKD', s)
    s = ''.join(ch for ch in s if not unicodedata.combining(ch))
    s = s.lower()
    s = re.sub(r'[^a-z0-9]+', '', s)
    return s


def contains_ignore_case(value, term: str) -> bool:
    """Case-insensitive substring test; None never matches."""
    if value is None or not term:
        return False
    return term.lower() in str(value).lower()


def safe_file_name(value: str) -> str:
    """
    Makes an uploaded file name safe to use as the last segment of a storage path.
    Letters and marks of any script are kept, so 'சூரியகாந்தி.png' survives:
    - drops any directory part
    - turns whitespace into '_'
    - keeps letters, marks, digits, '.', '-' and '_'
    - strips leading/trailing dots and underscores
    Example: '../My Photo.JPG' -> 'My_Photo.JPG'
    """
    if value is None:
        return ""
    s = unicodedata.normalize('NFC', str(value))
    s = re.split(r'[/\\]', s)[-1]
    s = '_'.join(s.split())
    s = ''.join(ch for ch in s if ch in '._-' or unicodedata.category(ch)[0] in 'LMN')
    return s.strip('._')
