import os
import pytest

from flipkit.core.config import reset_settings


# List of environment variables that may be modified by tests
_ENV_VARS_TO_ISOLATE = [
    "FLIPKIT_LOG_LEVEL",
    "FLIPKIT_LOG_JSON",
    "FLIPKIT_SERVICE_NAME",
    "FLIPKIT_ENVIRONMENT",
    "FLIPKIT_DEFAULT_TIMEZONE",
    "FLIPKIT_AUTO_CREATE",
]


@pytest.fixture(autouse=True)
def env_isolation():
    """Isolate environment variables and cached settings between tests."""
    backup = {k: os.environ.get(k) for k in _ENV_VARS_TO_ISOLATE}
    reset_settings()
    try:
        yield
    finally:
        for k, v in backup.items():
            if v is None:
                os.environ.pop(k, None)
            else:
                os.environ[k] = v
        reset_settings()


@pytest.fixture
def store():
    from flipkit.core.flipping import InMemoryFeatureStore

    return InMemoryFeatureStore()


@pytest.fixture
def make_context(store):
    """Build a FeatureEvaluationContext over the shared store."""
    from flipkit.core.flipping import FeatureEvaluationContext, FlippingExecutionContext

    def _make(feature_name="feature", context=None, **kwargs):
        return FeatureEvaluationContext(
            feature_name=feature_name,
            store=store,
            context=context or FlippingExecutionContext(),
            **kwargs,
        )

    return _make
