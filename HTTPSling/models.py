from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Tuple, Union

from .exceptions import InvalidUtf8
from .utils import validate_header

# Header Map
class HeaderMap:
    """Case-insensitive, insertion-ordered multimap of header fields.

    Names are keyed by their lower-cased form; the spelling used on the first
    insertion of a name is the one rendered on the wire.
    """

    def __init__(self, headers=None):
        self._fields: Dict[str, Tuple[str, List[str]]] = {}
        if headers:
            self.update(headers)

    def add(self, name: str, value: str):
        """Append a value for name, keeping any existing values."""
        validate_header(name, value)
        key = name.lower()
        if key in self._fields:
            self._fields[key][1].append(value)
        else:
            self._fields[key] = (name, [value])

    def set(self, name: str, value: str):
        """Replace every value of name with a single value."""
        validate_header(name, value)
        key = name.lower()
        original = self._fields[key][0] if key in self._fields else name
        self._fields[key] = (original, [value])

    def update(self, headers):
        """Add every (name, value) pair from a mapping, HeaderMap or iterable of pairs."""
        items = headers.items() if hasattr(headers, 'items') else headers
        for name, value in items:
            self.add(name, value)

    def get(self, name: str, default: Optional[str] = None) -> Optional[str]:
        entry = self._fields.get(name.lower())
        return entry[1][0] if entry else default

    def get_all(self, name: str) -> List[str]:
        entry = self._fields.get(name.lower())
        return list(entry[1]) if entry else []

    def remove(self, name: str):
        self._fields.pop(name.lower(), None)

    def items(self) -> Iterator[Tuple[str, str]]:
        """Yield (name, value) pairs in insertion order, one per value."""
        for name, values in self._fields.values():
            for value in values:
                yield name, value

    def copy(self) -> 'HeaderMap':
        return HeaderMap(self)

    def __contains__(self, name) -> bool:
        return isinstance(name, str) and name.lower() in self._fields

    def __iter__(self) -> Iterator[Tuple[str, str]]:
        return self.items()

    def __len__(self) -> int:
        return len(self._fields)

    def __eq__(self, other) -> bool:
        if not isinstance(other, HeaderMap):
            return NotImplemented
        return ({k: v[1] for k, v in self._fields.items()} ==
                {k: v[1] for k, v in other._fields.items()})

    def __repr__(self) -> str:
        return f"HeaderMap({list(self.items())!r})"

# Request/Response Models
@dataclass
class HTTPRequest:
    """Represents one request to render onto the wire."""
    method: str
    url: str
    headers: Union[HeaderMap, Dict[str, str]] = field(default_factory=HeaderMap)
    body: Optional[bytes] = None

    def __post_init__(self):
        self.method = self.method.upper()
        if not isinstance(self.headers, HeaderMap):
            self.headers = HeaderMap(self.headers)

@dataclass(frozen=True)
class ParsedTarget:
    """The validated pieces of an absolute request URL."""
    host: str
    port: int
    path: str
    query: str = ''

    @property
    def authority(self) -> str:
        host = f"[{self.host}]" if ':' in self.host else self.host
        return f"{host}:{self.port}"

    @property
    def path_and_query(self) -> str:
        if self.query:
            return f"{self.path}?{self.query}"
        return self.path

@dataclass
class RawResponse:
    """Raw bytes read back from the server, undecoded."""
    data: bytes
    request: bytes = b''
    elapsed: float = 0.0

    @property
    def size(self) -> int:
        return len(self.data)

    def text(self) -> str:
        """Decode the response bytes strictly as UTF-8."""
        try:
            return self.data.decode('utf-8')
        except UnicodeDecodeError as e:
            raise InvalidUtf8(f"Response is not valid UTF-8: {e}") from e
