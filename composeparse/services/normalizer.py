"""
Project normalizer.

The engine injects the project name into the resolved model: the
top-level ``name``, network and volume names, generated container names
and possibly other fields. Device supervisors use their own naming
scheme, so a normalized composition keeps none of them. Using a UUID as
project name makes every injected occurrence easy to find.
"""
import copy
from typing import Any, Dict, List

from composeparse.core.logger import get_logger

logger = get_logger(__name__)

SECTIONS = ("services", "networks", "volumes")


class ProjectNormalizer:
    """
    Turns an engine project model into a supervisor-ready composition.

    Output:
    - services (always present), networks and volumes only
    - no top-level name, network/volume names or container names
    - no value containing the project name
    """

    def normalize(self, project: Dict[str, Any], project_name: str = "") -> Dict[str, Any]:
        """
        Normalize a resolved project.

        Args:
            project: Project dictionary from the engine (left untouched)
            project_name: Name the project was loaded with; defaults to
                the project's own ``name`` field

        Returns:
            New normalized composition dictionary
        """
        raw = copy.deepcopy(project)
        project_name = project_name or raw.get("name") or ""

        raw.pop("name", None)
        if project_name:
            removed = self._remove_project_name(raw, project_name)
            logger.debug(f"Removed {removed} value(s) containing project name")

        composition: Dict[str, Any] = {
            "services": {
                name: self._normalize_service(service)
                for name, service in (raw.get("services") or {}).items()
            }
        }

        if raw.get("networks"):
            composition["networks"] = {
                name: self._strip_name(network)
                for name, network in raw["networks"].items()
            }

        if raw.get("volumes"):
            composition["volumes"] = {
                name: self._strip_name(volume)
                for name, volume in raw["volumes"].items()
            }

        return composition

    def _normalize_service(self, service: Any) -> Dict[str, Any]:
        service = dict(service or {})
        # Set by the supervisor
        service.pop("container_name", None)

        # Engines render a missing entrypoint as [null]
        entrypoint = service.get("entrypoint")
        if isinstance(entrypoint, list) and entrypoint and entrypoint[0] is None:
            del service["entrypoint"]

        return service

    def _strip_name(self, definition: Any) -> Dict[str, Any]:
        definition = dict(definition or {})
        # Set by the supervisor
        definition.pop("name", None)
        return definition

    def _remove_project_name(self, obj: Any, project_name: str) -> int:
        """Drop every string value containing project_name, depth first."""
        removed = 0
        stack: List[Any] = [obj]

        while stack:
            current = stack.pop()

            if isinstance(current, dict):
                for key in list(current):
                    value = current[key]
                    if isinstance(value, str) and project_name in value:
                        del current[key]
                        removed += 1
                    elif isinstance(value, (dict, list)):
                        stack.append(value)

            elif isinstance(current, list):
                kept = [v for v in current if not (isinstance(v, str) and project_name in v)]
                removed += len(current) - len(kept)
                current[:] = kept
                stack.extend(v for v in kept if isinstance(v, (dict, list)))

        return removed
