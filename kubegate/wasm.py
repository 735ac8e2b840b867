"""WasmPlugin custom resource conversion and plugin instance scoping.

A WasmPlugin resource carries one global configuration (``defaultConfig``)
plus match rules, each bound to a list of domains or a list of ingresses.
An instance is addressed by scope and target; a rule matches a target when
its domain or ingress list contains it, so a rule shared by several domains
is reachable through any of them.
"""

import copy
from typing import List, Optional, Tuple

from kubernetes import client

from .annotations import decode_bool, encode_bool
from .constants import OCI_SCHEME, Annotation, Label
from .crds import WASM_PLUGIN_SPEC_SCALAR_FIELDS, MatchRule, WasmPluginResource, WasmPluginSpec
from .errors import InvalidArgumentError
from .kube import get_annotation, get_label, object_name, object_version, set_annotation, set_label
from .logging_config import get_logger, log_conversion, log_function_entry, log_function_exit, log_rejection
from .models import WasmPlugin, WasmPluginInstance, WasmPluginInstanceScope

logger = get_logger(__name__)


def wasm_plugin_resource_name(name: Optional[str], plugin_version: Optional[str]) -> str:
    return f"{name}-{plugin_version}"


def split_image_url(url: Optional[str]) -> Tuple[Optional[str], Optional[str]]:
    """Split ``oci://repo/image:tag`` into ``("repo/image", "tag")``.

    A colon that belongs to a registry port (``host:5000/image``) is not a tag separator.
    """
    if not url:
        return None, None
    _, sep, rest = url.partition("://")
    if sep:
        url = rest
    head, sep, tail = url.rpartition(":")
    if sep and head and tail and "/" not in tail:
        return head, tail
    return url, None


def build_image_url(repository: Optional[str], version: Optional[str]) -> Optional[str]:
    if repository is None:
        return None
    url = OCI_SCHEME + repository
    if version:
        url = f"{url}:{version}"
    return url


def wasm_plugin_from_cr(cr: WasmPluginResource) -> WasmPlugin:
    metadata = cr.metadata
    spec = cr.spec
    repository, image_version = split_image_url(spec.url if spec is not None else None)

    plugin = WasmPlugin(
        name=get_label(metadata, Label.WASM_PLUGIN_NAME_KEY),
        plugin_version=get_label(metadata, Label.WASM_PLUGIN_VERSION_KEY),
        version=object_version(cr),
        category=get_label(metadata, Label.WASM_PLUGIN_CATEGORY_KEY),
        built_in=decode_bool(get_label(metadata, Label.WASM_PLUGIN_BUILT_IN_KEY)),
        title=get_annotation(metadata, Annotation.WASM_PLUGIN_TITLE_KEY),
        description=get_annotation(metadata, Annotation.WASM_PLUGIN_DESCRIPTION_KEY),
        icon=get_annotation(metadata, Annotation.WASM_PLUGIN_ICON_KEY),
        image_repository=repository,
        image_version=image_version,
        phase=spec.phase if spec is not None else None,
        priority=spec.priority if spec is not None else None,
    )
    log_conversion(logger, "WasmPluginResource", "WasmPlugin", name=plugin.name,
                   plugin_version=plugin.plugin_version)
    return plugin


def wasm_plugin_to_cr(plugin: WasmPlugin) -> WasmPluginResource:
    metadata = client.V1ObjectMeta(
        name=wasm_plugin_resource_name(plugin.name, plugin.plugin_version),
        resource_version=plugin.version,
    )
    labels = {
        Label.WASM_PLUGIN_NAME_KEY: plugin.name,
        Label.WASM_PLUGIN_VERSION_KEY: plugin.plugin_version,
        Label.WASM_PLUGIN_CATEGORY_KEY: plugin.category,
        Label.WASM_PLUGIN_BUILT_IN_KEY: encode_bool(plugin.built_in) if plugin.built_in is not None else None,
    }
    for key, value in labels.items():
        if value is not None:
            set_label(metadata, key, value)

    annotations = {
        Annotation.WASM_PLUGIN_TITLE_KEY: plugin.title,
        Annotation.WASM_PLUGIN_DESCRIPTION_KEY: plugin.description,
        Annotation.WASM_PLUGIN_ICON_KEY: plugin.icon,
    }
    for key, value in annotations.items():
        if value is not None:
            set_annotation(metadata, key, value)

    spec = WasmPluginSpec(
        phase=plugin.phase,
        priority=plugin.priority,
        url=build_image_url(plugin.image_repository, plugin.image_version),
    )
    log_conversion(logger, "WasmPlugin", "WasmPluginResource", name=plugin.name,
                   plugin_version=plugin.plugin_version)
    return WasmPluginResource(metadata=metadata, spec=spec)


def merge_wasm_plugin_spec(src: WasmPluginResource, dst: WasmPluginResource) -> None:
    """Merge the spec of ``src`` into ``dst`` in place.

    Every spec field but the match rules is taken from ``src``. Match rules of ``dst`` are
    kept as they are; rules of ``src`` whose identity is not yet present are
    appended in source order.
    """
    src_spec = src.spec
    if src_spec is None:
        return
    if dst.spec is None:
        dst.spec = src_spec.model_copy(deep=True)
        return

    dst_spec = dst.spec
    for field in WASM_PLUGIN_SPEC_SCALAR_FIELDS:
        setattr(dst_spec, field, copy.deepcopy(getattr(src_spec, field)))

    if not src_spec.match_rules:
        return

    merged = list(dst_spec.match_rules or [])
    known = {rule.identity() for rule in merged}
    for rule in src_spec.match_rules:
        identity = rule.identity()
        if identity in known:
            continue
        merged.append(rule.model_copy(deep=True))
        known.add(identity)
    dst_spec.match_rules = merged


def _rule_targets(rule: MatchRule, scope: WasmPluginInstanceScope) -> List[str]:
    if scope == WasmPluginInstanceScope.DOMAIN:
        return rule.domain or []
    if scope == WasmPluginInstanceScope.ROUTE:
        return rule.ingress or []
    return []


def _find_rule(spec: WasmPluginSpec, scope: WasmPluginInstanceScope, target: Optional[str]) -> Optional[MatchRule]:
    if not target:
        return None
    for rule in spec.match_rules or []:
        if target in _rule_targets(rule, scope):
            return rule
    return None


def get_instance_from_cr(cr: WasmPluginResource, scope: WasmPluginInstanceScope,
                         target: Optional[str]) -> Optional[WasmPluginInstance]:
    """Extract the plugin configuration applied at ``scope``/``target``.

    Returns:
        The instance, or None when the resource has no spec or no match
        rule covers the target.
    """
    spec = cr.spec
    if spec is None:
        return None

    identity = dict(
        plugin_name=get_label(cr.metadata, Label.WASM_PLUGIN_NAME_KEY),
        plugin_version=get_label(cr.metadata, Label.WASM_PLUGIN_VERSION_KEY),
        version=object_version(cr),
        scope=scope,
    )

    if scope == WasmPluginInstanceScope.GLOBAL:
        return WasmPluginInstance(
            **identity,
            target=None,
            enabled=not spec.default_config_disable,
            configurations=copy.deepcopy(spec.default_config or {}),
        )

    rule = _find_rule(spec, scope, target)
    if rule is None:
        logger.debug("Plugin not configured for target", plugin=object_name(cr), scope=scope.value, target=target)
        return None
    return WasmPluginInstance(
        **identity,
        target=target,
        enabled=not rule.config_disable,
        configurations=copy.deepcopy(rule.config or {}),
    )


def set_instance_to_cr(cr: WasmPluginResource, instance: WasmPluginInstance) -> None:
    """Write ``instance`` into ``cr`` in place.

    Raises:
        InvalidArgumentError: If the scope is missing, or a domain/route
            instance has no target.
    """
    log_function_entry(logger, "set_instance_to_cr", plugin=object_name(cr),
                       scope=instance.scope, target=instance.target)
    if instance.scope is None:
        log_rejection(logger, "set_instance_to_cr", "missing scope", plugin=object_name(cr))
        raise InvalidArgumentError("Plugin instance scope is required")

    if cr.spec is None:
        cr.spec = WasmPluginSpec()
    spec = cr.spec

    configurations = copy.deepcopy(instance.configurations)
    disabled = instance.enabled is False

    if instance.scope == WasmPluginInstanceScope.GLOBAL:
        spec.default_config = configurations
        spec.default_config_disable = disabled
        log_function_exit(logger, "set_instance_to_cr", updated="default")
        return

    if not instance.target:
        log_rejection(logger, "set_instance_to_cr", "missing target",
                      plugin=object_name(cr), scope=instance.scope.value)
        raise InvalidArgumentError(f"A {instance.scope.value} plugin instance needs a target")

    rule = _find_rule(spec, instance.scope, instance.target)
    if rule is not None:
        rule.config = configurations
        rule.config_disable = disabled
        log_function_exit(logger, "set_instance_to_cr", updated="existing_rule")
        return

    if instance.scope == WasmPluginInstanceScope.DOMAIN:
        rule = MatchRule.for_domain(instance.target, configurations, disabled)
    else:
        rule = MatchRule.for_ingress(instance.target, configurations, disabled)
    if spec.match_rules is None:
        spec.match_rules = []
    spec.match_rules.append(rule)
    log_function_exit(logger, "set_instance_to_cr", updated="new_rule")


def remove_instance_from_cr(cr: WasmPluginResource, scope: WasmPluginInstanceScope,
                            target: Optional[str]) -> bool:
    """Remove the configuration applied at ``scope``/``target``.

    A domain/route removal drops every rule whose list contains the target,
    not only the target itself.

    Returns:
        True if ``cr`` was modified.
    """
    spec = cr.spec
    if spec is None:
        return False

    if scope == WasmPluginInstanceScope.GLOBAL:
        if spec.default_config is None:
            return False
        spec.default_config = None
        return True

    if not target or not spec.match_rules:
        return False

    remaining = [rule for rule in spec.match_rules if target not in _rule_targets(rule, scope)]
    if len(remaining) == len(spec.match_rules):
        return False
    spec.match_rules[:] = remaining
    logger.debug("Plugin instance removed", plugin=object_name(cr), scope=scope.value, target=target)
    return True
