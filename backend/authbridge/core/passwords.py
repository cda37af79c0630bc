"""
Secure password synthesis.

Passwords produced here are single-use internal secrets: they are set on a
user pool account, used once to obtain session tokens, and then dropped.
They are never logged, returned to clients, or stored.
"""
import random
import string
from dataclasses import dataclass
from typing import Optional

from authbridge.core.errors import EntropyFailure, InvalidPolicy

# Minimum length accepted by Cognito's default password policy
MIN_LENGTH = 8

UPPER_CHARS = string.ascii_uppercase
LOWER_CHARS = string.ascii_lowercase
NUMBER_CHARS = string.digits
SPECIAL_CHARS = "!@#$%^&*()_+-=[]{}|;:,.<>?"


@dataclass(frozen=True)
class PasswordPolicy:
    """Character-class policy for a synthesized password."""
    length: int
    require_upper: bool = True
    require_lower: bool = True
    require_number: bool = True
    require_special: bool = True

    @classmethod
    def strict(cls, length: int = 15) -> "PasswordPolicy":
        """Policy with every character class required."""
        return cls(length=length)

    def required_count(self) -> int:
        return sum(
            (self.require_upper, self.require_lower, self.require_number, self.require_special)
        )


class PasswordSynthesizer:
    """
    Generates passwords that satisfy a PasswordPolicy.

    Every draw, for character selection and for every shuffle swap, comes
    from ``random.SystemRandom`` (os.urandom). Seeded generators are refused.
    The instance holds no state besides the random source and can be shared
    between concurrent operations.
    """

    def __init__(
        self,
        random_source: Optional[random.SystemRandom] = None,
        upper: str = UPPER_CHARS,
        lower: str = LOWER_CHARS,
        number: str = NUMBER_CHARS,
        special: str = SPECIAL_CHARS,
    ):
        if random_source is None:
            random_source = random.SystemRandom()
        if not isinstance(random_source, random.SystemRandom):
            raise TypeError("random_source must be a random.SystemRandom instance")
        self._random = random_source
        # Priority order: upper, lower, number, special
        self._classes = (
            ("upper", upper),
            ("lower", lower),
            ("number", number),
            ("special", special),
        )

    def generate(self, policy: PasswordPolicy) -> str:
        """
        Generate a password for the given policy.

        Args:
            policy: Length and required character classes

        Returns:
            Password of exactly ``policy.length`` characters with at least one
            character from every required class

        Raises:
            InvalidPolicy: If the policy cannot be satisfied or a required
                class has an empty alphabet
            EntropyFailure: If the secure random source fails
        """
        required = self._required_alphabets(policy)

        if policy.length < MIN_LENGTH:
            raise InvalidPolicy(f"password length must be at least {MIN_LENGTH} characters")
        if policy.length < len(required):
            raise InvalidPolicy(
                f"password length {policy.length} cannot cover "
                f"{len(required)} required character classes"
            )
        if not required:
            raise InvalidPolicy("password policy requires no character classes")

        buffer = [self._choice(alphabet) for alphabet in required]

        combined = "".join(required)
        buffer.extend(self._choice(combined) for _ in range(policy.length - len(required)))

        self._shuffle(buffer)
        return "".join(buffer)

    def _required_alphabets(self, policy: PasswordPolicy) -> list[str]:
        flags = {
            "upper": policy.require_upper,
            "lower": policy.require_lower,
            "number": policy.require_number,
            "special": policy.require_special,
        }
        alphabets = []
        for name, alphabet in self._classes:
            if not flags[name]:
                continue
            if not alphabet:
                raise InvalidPolicy(f"character set for required class '{name}' is empty")
            alphabets.append(alphabet)
        return alphabets

    def _randbelow(self, n: int) -> int:
        """Uniform integer in [0, n)."""
        try:
            return self._random.randrange(n)
        except (OSError, NotImplementedError) as e:
            raise EntropyFailure("secure random source unavailable") from e

    def _choice(self, alphabet: str) -> str:
        return alphabet[self._randbelow(len(alphabet))]

    def _shuffle(self, buffer: list[str]) -> None:
        """In-place Fisher-Yates shuffle, swap index drawn from [0, i]."""
        for i in range(len(buffer) - 1, 0, -1):
            j = self._randbelow(i + 1)
            buffer[i], buffer[j] = buffer[j], buffer[i]


def generate_password(length: int = 15) -> str:
    """Generate a password with all four character classes required."""
    return PasswordSynthesizer().generate(PasswordPolicy.strict(length))
