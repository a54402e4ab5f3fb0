"""Password hashing for stored accounts (bcrypt)."""
import logging
import os

import bcrypt

logger = logging.getLogger('gamepulse.credentials')

DEFAULT_ROUNDS = 12
# bcrypt only looks at the first 72 bytes of a password
MAX_PASSWORD_BYTES = 72


class CredentialStore:
    """Hashes and verifies passwords with a fixed bcrypt work factor.

    The work factor comes from ``GAMEPULSE_BCRYPT_ROUNDS`` unless given
    explicitly.  Salts are generated per hash and embedded in the result.
    """

    def __init__(self, rounds: int = None) -> None:
        if rounds is None:
            rounds = int(os.getenv('GAMEPULSE_BCRYPT_ROUNDS', DEFAULT_ROUNDS))
        if not 4 <= rounds <= 31:
            raise ValueError("bcrypt rounds must be between 4 and 31")
        self.rounds = rounds
        # Verified against when a login names an unknown account
        self.dummy_credential = self.hash(os.urandom(16).hex())

    def hash(self, plaintext: str) -> str:
        """Return the bcrypt credential for *plaintext*.

        Raises:
            ValueError: *plaintext* is longer than bcrypt accepts.
        """
        raw = plaintext.encode('utf-8')
        if len(raw) > MAX_PASSWORD_BYTES:
            raise ValueError(f"password exceeds {MAX_PASSWORD_BYTES} bytes")
        return bcrypt.hashpw(raw, bcrypt.gensalt(rounds=self.rounds)).decode('utf-8')

    def verify(self, plaintext: str, credential: str) -> bool:
        if not isinstance(plaintext, str) or not isinstance(credential, str):
            return False
        if not plaintext or not credential:
            return False
        try:
            return bcrypt.checkpw(plaintext.encode('utf-8'), credential.encode('utf-8'))
        except ValueError as exc:
            # Malformed stored hash or over-long password
            logger.warning("Password verification rejected: %s", exc)
            return False
