import uuid


def new_entity_id() -> str:
    """Random v4 UUID used for rows, headers, bodies and footers."""
    return str(uuid.uuid4())


def pad2(number: int) -> str:
    """Zero-pad a column number to two digits ("1" -> "01", "12" -> "12")."""
    return str(number).zfill(2)
