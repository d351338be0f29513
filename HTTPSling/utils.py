def validate_method(method):
  # Methods go on the request line verbatim, so no whitespace or control chars
  if not isinstance(method, str):
      raise TypeError(f"Method must be a string, got {type(method)!r}")

  if not method:
      raise ValueError("Method cannot be empty")

  if not method.isascii():
      raise ValueError(f"Method {method!r} contains non-ASCII characters")

  for ch in method:
      if ch.isspace() or ord(ch) < 0x20 or ord(ch) == 0x7f:
          raise ValueError(f"Method {method!r} contains whitespace or control characters")


def validate_header(name, value):
  # Validate a single header field before it's stored
  if not isinstance(name, str) or not isinstance(value, str):
      raise TypeError(f"Header name and value must be strings, got {type(name)!r} and {type(value)!r}")

  if not name:
      raise ValueError("Header name cannot be empty")

  if not name.isascii() or ':' in name or any(ch.isspace() for ch in name):
      raise ValueError(f"Header name {name!r} must be ASCII without ':' or whitespace")

  if '\r' in value or '\n' in value:
      raise ValueError(f"Header {name!r} value cannot contain CR or LF")

  # Header bytes go on the wire as latin-1
  try:
      value.encode('latin-1')
  except UnicodeEncodeError:
      raise ValueError(f"Header {name!r} value cannot be encoded as latin-1")


def has_control_chars(text):
  """True if text holds whitespace or ASCII control characters."""
  return any(ch.isspace() or ord(ch) < 0x20 or ord(ch) == 0x7f for ch in text)
