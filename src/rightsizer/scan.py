"""Scan document loading for the CLI."""

from pathlib import Path
from typing import Any, Dict, List, Union
import structlog
import yaml

from rightsizer.analytics.aggregation import build_observation, resolve_workload_owner
from rightsizer.analytics.policies import DEFAULT_POLICY_TABLES, PolicyTables, classify_environment
from rightsizer.core.exceptions import ConfigurationException
from rightsizer.core.utils import parse_resource_string
from rightsizer.models.usage import Sample, samples_from_series
from rightsizer.models.validation import validate_observation
from rightsizer.models.workload import AggregatedWorkloadObservation, PodUsage, WorkloadType

logger = structlog.get_logger(__name__)


def load_document(path: Union[str, Path]) -> Dict[str, Any]:
    """Load a YAML or JSON document (JSON is valid YAML)."""
    with open(path, 'r') as f:
        try:
            document = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationException(f"Cannot parse {path}: {e}", {"path": str(path)})

    if not isinstance(document, dict):
        raise ConfigurationException(f"{path} must contain a mapping at the top level", {"path": str(path)})
    return document


def parse_pod(entry: Dict[str, Any]) -> PodUsage:
    return PodUsage(
        name=entry.get("name", ""),
        container=entry.get("container", ""),
        requested_cpu_m=parse_resource_string(entry.get("requested_cpu"), "cpu"),
        requested_memory_bytes=parse_resource_string(entry.get("requested_memory"), "memory"),
        observed_cpu_m=parse_resource_string(entry.get("observed_cpu"), "cpu"),
        observed_memory_bytes=parse_resource_string(entry.get("observed_memory"), "memory"),
    )


def parse_series(raw: Any) -> List[Sample]:
    """Parse ``[[timestamp, value], ...]`` pairs."""
    if not raw:
        return []
    return samples_from_series((pair[0], pair[1]) for pair in raw)


def observation_from_entry(entry: Dict[str, Any], lookback_days: int, resolution_minutes: int,
                           tables: PolicyTables = DEFAULT_POLICY_TABLES) -> AggregatedWorkloadObservation:
    """Turn one ``workloads[]`` entry into an observation."""
    namespace = entry.get("namespace")
    if not namespace:
        raise ConfigurationException("Workload entry is missing 'namespace'", {"entry": entry.get("name")})

    kind = entry.get("kind")
    if entry.get("owner_name"):
        workload_type, owner = resolve_workload_owner(kind, entry["owner_name"])
        name = entry.get("name") or owner
    else:
        workload_type = WorkloadType(kind or WorkloadType.UNKNOWN)
        name = entry.get("name")

    if not name:
        raise ConfigurationException(f"Workload entry in {namespace} has no name", {"namespace": namespace})

    pods = [parse_pod(p) for p in entry.get("pods") or []]
    if not pods:
        raise ConfigurationException(f"Workload {namespace}/{name} has no pods",
                                     {"namespace": namespace, "name": name})

    observation = build_observation(
        namespace,
        name,
        workload_type,
        pods,
        environment=classify_environment(namespace, entry.get("namespace_labels")),
        hpa_name=entry.get("hpa_name"),
        cpu_samples=parse_series(entry.get("cpu_samples")),
        memory_samples=parse_series(entry.get("memory_samples")),
        lookback_days=lookback_days,
        resolution_minutes=resolution_minutes,
        tables=tables,
    )

    problems = validate_observation(observation)
    if problems:
        logger.warning("Workload has questionable inputs", workload=f"{namespace}/{name}", problems=problems)
    return observation


def observations_from_document(document: Dict[str, Any], lookback_days: int, resolution_minutes: int,
                               tables: PolicyTables = DEFAULT_POLICY_TABLES) -> List[AggregatedWorkloadObservation]:
    workloads = document.get("workloads")
    if not isinstance(workloads, list):
        raise ConfigurationException("Scan document must contain a 'workloads' list")

    observations = [
        observation_from_entry(entry, lookback_days, resolution_minutes, tables)
        for entry in workloads
    ]
    logger.info("Scan document loaded", workloads=len(observations))
    return observations
