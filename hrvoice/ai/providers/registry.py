"""Name -> class registries for each provider capability.

Provider modules register themselves on import with a decorator:

    @register_tts_provider
    class OpenAITTSProvider(TTSProvider):
        ...

The factory then resolves the configured name without importing backends
by hand.
"""

from typing import Generic, TypeVar

P = TypeVar("P", bound=type)


class ProviderRegistryError(Exception):
    """Base error for provider registry issues."""


class ProviderNotFoundError(ProviderRegistryError):
    """Raised when a requested provider is not registered."""


class DuplicateProviderError(ProviderRegistryError):
    """Raised when two providers register under the same name."""


def _provider_name(provider_class: type) -> str:
    """Evaluate the ``name`` property on the class itself (no instance needed)."""
    attr = getattr(provider_class, "name", None)
    if isinstance(attr, property) and attr.fget is not None:
        attr = attr.fget(provider_class)
    elif callable(attr):
        attr = attr()
    if not isinstance(attr, str) or not attr:
        raise ProviderRegistryError(
            f"Provider {provider_class.__name__} must define a string 'name' property"
        )
    return attr


class ProviderRegistry(Generic[P]):
    def __init__(self, kind: str) -> None:
        self.kind = kind
        self._classes: dict[str, P] = {}

    def register(self, provider_class: P) -> P:
        name = _provider_name(provider_class)
        if name in self._classes:
            raise DuplicateProviderError(f"{self.kind} provider '{name}' is already registered")
        self._classes[name] = provider_class
        return provider_class

    def unregister(self, name: str) -> None:
        self._classes.pop(name, None)

    def get(self, name: str) -> P:
        try:
            return self._classes[name]
        except KeyError:
            registered = ", ".join(sorted(self._classes)) or "(none)"
            raise ProviderNotFoundError(
                f"Unknown {self.kind} provider: '{name}'. Registered providers: {registered}"
            ) from None

    def snapshot(self) -> dict[str, P]:
        return dict(self._classes)

    def __contains__(self, name: str) -> bool:
        return name in self._classes


llm_providers: ProviderRegistry = ProviderRegistry("LLM")
stt_providers: ProviderRegistry = ProviderRegistry("STT")
tts_providers: ProviderRegistry = ProviderRegistry("TTS")
moderation_providers: ProviderRegistry = ProviderRegistry("Moderation")

register_llm_provider = llm_providers.register
register_stt_provider = stt_providers.register
register_tts_provider = tts_providers.register
register_moderation_provider = moderation_providers.register


def get_registered_llm_providers() -> dict[str, type]:
    return llm_providers.snapshot()


def get_registered_stt_providers() -> dict[str, type]:
    return stt_providers.snapshot()


def get_registered_tts_providers() -> dict[str, type]:
    return tts_providers.snapshot()


def get_registered_moderation_providers() -> dict[str, type]:
    return moderation_providers.snapshot()
