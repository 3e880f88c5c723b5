"""Hydra ConfigStore registration for models and data modules."""

from __future__ import annotations

from typing import Any

from hydra.core.config_store import ConfigStore
from loguru import logger


def register(
    cls: type[Any] | None = None,
    *,
    group: str | None = None,
    name: str | None = None,
    **defaults: Any,
) -> type[Any] | Any:
    """Decorator storing a ``_target_`` node for the class in ConfigStore.

    Usable bare (``@register``) or with arguments
    (``@register(group="model", name="cnn_regressor", hidden_size=512)``).
    Extra keyword arguments become default values of the stored node, so a
    root config can select the class with ``defaults: [model: <name>]`` and
    override individual fields from the command line.

    Arguments:
        cls: The class to register.
        group: ConfigStore group.  Defaults to the parent package name, e.g.
            ``"models"`` for ``image_regression.models.regressor``.
        name: Config name.  Defaults to the class name.
        **defaults: Default field values for the node.
    """

    def _store(target_cls: type[Any]) -> type[Any]:
        config_group = group or target_cls.__module__.split(".")[-2]
        config_name = name or target_cls.__name__
        node: dict[str, Any] = {
            "_target_": f"{target_cls.__module__}.{target_cls.__qualname__}",
            **defaults,
        }
        logger.debug(
            f"Registering {target_cls.__name__} as '{config_name}' "
            f"in group '{config_group}'"
        )
        ConfigStore.instance().store(group=config_group, name=config_name, node=node)
        return target_cls

    if cls is None:
        return _store
    return _store(cls)
