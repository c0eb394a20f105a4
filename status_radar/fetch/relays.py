"""Relay strategies for reaching status endpoints.

A relay maps a target URL to the URL actually requested. Relays are tried in
order by the fetcher; the set of relays is configuration, not core logic.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable
from urllib.parse import quote

from status_radar.fetch.constants import URI_COMPONENT_SAFE
from status_radar.registry.schemas import DEFAULT_RELAYS, RelayConfig, RelayKind


def encode_uri_component(value: str) -> str:
    """Percent-encode a value the way ``encodeURIComponent`` does."""
    return quote(value, safe=URI_COMPONENT_SAFE)


class Relay(ABC):
    """Base class for relay strategies."""

    def __init__(self, name: str) -> None:
        """Initialize the relay.

        Args:
            name: Relay identifier used in logs and metrics.
        """
        self._name = name

    @property
    def name(self) -> str:
        """Get the relay name."""
        return self._name

    @abstractmethod
    def build_request_url(self, target_url: str) -> str:
        """Wrap a target URL into the relayed request URL.

        Args:
            target_url: URL of the upstream status document.

        Returns:
            URL to request.
        """

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self._name!r})"


class TemplateRelay(Relay):
    """Relay that substitutes the encoded target URL into a template."""

    def __init__(self, name: str, template: str) -> None:
        """Initialize the relay.

        Args:
            name: Relay identifier.
            template: URL template containing a ``{url}`` placeholder.

        Raises:
            ValueError: If the template has no placeholder.
        """
        if "{url}" not in template:
            msg = f"Relay template for '{name}' must contain '{{url}}'"
            raise ValueError(msg)
        super().__init__(name)
        self._template = template

    def build_request_url(self, target_url: str) -> str:
        return self._template.replace("{url}", encode_uri_component(target_url))


class DirectRelay(Relay):
    """Requests the target URL without an intermediary."""

    def __init__(self, name: str = "direct") -> None:
        super().__init__(name)

    def build_request_url(self, target_url: str) -> str:
        return target_url


def relay_from_config(config: RelayConfig) -> Relay:
    """Build a relay strategy from its configuration."""
    if config.kind == RelayKind.DIRECT:
        return DirectRelay(config.name)
    # Template presence is enforced by RelayConfig validation
    return TemplateRelay(config.name, config.template or "")


def build_relays(configs: Iterable[RelayConfig] | None = None) -> list[Relay]:
    """Build the ordered relay chain.

    Args:
        configs: Relay configurations; the default chain when None.

    Returns:
        Relays in configured order.
    """
    return [relay_from_config(c) for c in (configs or DEFAULT_RELAYS)]
