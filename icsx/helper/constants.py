class Character:
    """Space and Line-break characters"""

    CR = "\r"
    LF = "\n"
    CRLF = CR + LF
    SPACE = " "
    TAB = "\t"
    SPACEORTAB = SPACE + TAB
    DQUOTE = '"'


class Layout:
    """strptime layouts for DATE and DATE-TIME values"""

    DATE = "%Y%m%d"
    DATE_TIME = "%Y%m%dT%H%M%S"
    DATE_TIME_UTC = "%Y%m%dT%H%M%SZ"


# literal lengths of the layouts above
LAYOUT_LENGTHS = {8: Layout.DATE, 15: Layout.DATE_TIME, 16: Layout.DATE_TIME_UTC}
