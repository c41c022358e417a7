from passlib.context import CryptContext

BCRYPT_ROUNDS = 10


# PUBLIC_INTERFACE
class PasswordHasher:
    """
    One-way credential hasher backed by passlib's bcrypt scheme.
    """

    def __init__(self, rounds: int = BCRYPT_ROUNDS):
        self.rounds = rounds
        self._context = CryptContext(
            schemes=["bcrypt"],
            deprecated="auto",
            bcrypt__rounds=rounds,
        )

    def hash(self, password: str) -> str:
        return self._context.hash(password)

    def verify(self, password: str, hashed_password: str) -> bool:
        return self._context.verify(password, hashed_password)
