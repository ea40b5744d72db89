import uuid

def gen_id() -> str:
    return str(uuid.uuid4())


def gen_hex(n_bytes: int = 16) -> str:
    return uuid.uuid4().hex[: n_bytes * 2]
