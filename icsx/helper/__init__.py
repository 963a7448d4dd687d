from .config import Options, get_buffer, logger
from .constants import LAYOUT_LENGTHS, Character, Layout
from .converter import to_basestring, to_stream
from .funcs import iter_chunks, split_by_size
