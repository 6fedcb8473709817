import secrets, string
ALPHABET = string.ascii_lowercase + string.digits

def generate_key(length: int = 32) -> str:
    return "".join(secrets.choice(ALPHABET) for _ in range(length))
