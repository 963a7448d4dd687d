import datetime as dt

TEST_FILE_DIR = "tests/test_files"

one_day = dt.timedelta(days=1)


def get_test_file(file_name: str) -> str:
    """Helper function to open and read test files."""
    filepath = f"{TEST_FILE_DIR}/{file_name}"
    with open(filepath, "r", encoding="utf-8") as f:
        text = f.read()
    return text


def crlf(text: str) -> str:
    """Turn the LF line endings of a test file into CRLF."""
    return text.replace("\r\n", "\n").replace("\n", "\r\n")
