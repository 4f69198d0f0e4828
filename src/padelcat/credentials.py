"""Password hashing with bcrypt."""

import bcrypt


class PasswordHasher:
    """One-way hash + compare for player passwords."""

    def __init__(self, rounds: int = 10) -> None:
        self.rounds = rounds

    def hash(self, plaintext: str) -> str:
        salt = bcrypt.gensalt(rounds=self.rounds)
        return bcrypt.hashpw(plaintext.encode("utf-8"), salt).decode("ascii")

    def compare(self, plaintext: str, hashed: str) -> bool:
        """True if ``plaintext`` matches ``hashed``. Malformed hashes never match."""
        try:
            return bcrypt.checkpw(plaintext.encode("utf-8"), hashed.encode("ascii"))
        except ValueError:
            return False
