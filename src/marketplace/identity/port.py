"""Identity resolver port (abstract interface).

Resolvers turn a bearer token into an ``Identity``. Token issuance and the
token format belong to the adapter; the core only consumes the result.
"""

from abc import ABC, abstractmethod

from marketplace.identity.model import Identity


class IdentityResolver(ABC):
    """Abstract identity resolver interface."""

    @abstractmethod
    def resolve(self, token: str) -> Identity:
        """Return the identity behind ``token``.

        Raises:
            AuthenticationError: when the token is missing, malformed, expired
                or signed with the wrong key.
        """
        ...
