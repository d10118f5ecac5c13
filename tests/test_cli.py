"""
Tests for the click CLI
"""
import json

import pytest
import yaml
from click.testing import CliRunner

from rightsizer.cli import cli

START = 1704067200  # 2024-01-01T00:00:00Z, a Monday


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    for var in ("PRICING_PROVIDER", "PRICING_REGION", "ANALYSIS_LOOKBACK_DAYS", "LOGGING_CONFIG_PATH"):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def scan_file(tmp_path):
    document = {
        "workloads": [
            {
                "namespace": "shop-staging",
                "kind": "ReplicaSet",
                "owner_name": "api-6d4cf56db6",
                "pods": [
                    {"name": "api-1", "requested_cpu": "1", "requested_memory": "1Gi",
                     "observed_cpu": "200m", "observed_memory": "256Mi"},
                    {"name": "api-2", "requested_cpu": "1000m", "requested_memory": "1Gi",
                     "observed_cpu": "200m", "observed_memory": "256Mi"},
                ],
            },
            {
                "namespace": "shop-staging",
                "name": "reports",
                "kind": "CronJob",
                "pods": [
                    {"name": "reports-1", "requested_cpu": "500m", "requested_memory": "512Mi",
                     "observed_cpu": "5m", "observed_memory": "20Mi"},
                ],
            },
            {
                "namespace": "kube-system",
                "name": "node-exporter",
                "kind": "DaemonSet",
                "pods": [
                    {"name": "ne-1", "requested_cpu": "100m", "requested_memory": "64Mi",
                     "observed_cpu": "10m", "observed_memory": "20Mi"},
                ],
            },
        ]
    }
    path = tmp_path / "scan.yaml"
    path.write_text(yaml.safe_dump(document))
    return path


class TestRecommendCommand:
    """rightsizer recommend"""

    def test_json_output(self, scan_file, tmp_path):
        out = tmp_path / "out" / "recs.json"
        result = CliRunner().invoke(cli, ["recommend", str(scan_file), "--format", "json",
                                          "--output", str(out), "--provider", "default"])

        assert result.exit_code == 0, result.output
        payload = json.loads(out.read_text())
        recs = payload["recommendations"]

        # ranked: the two actionable ones first, the DaemonSet last
        assert [r["type"] for r in recs] == ["RIGHT_SIZE", "SCALE_DOWN", "NO_ACTION"]
        assert recs[0]["name"] == "api"
        assert recs[0]["workload_type"] == "Deployment"
        assert recs[0]["environment"] == "staging"
        assert recs[0]["recommended_cpu_m"] == 300
        assert recs[0]["savings_monthly"] == pytest.approx(17.975 * 2)
        assert recs[1]["name"] == "reports"
        assert recs[2]["name"] == "node-exporter"
        assert payload["summary"]["total"] == 3

    def test_text_output_actionable_only(self, scan_file):
        result = CliRunner().invoke(cli, ["recommend", str(scan_file), "--actionable-only",
                                          "--provider", "aws"])

        assert result.exit_code == 0, result.output
        assert "shop-staging/api" in result.output
        assert "Scale to 0 replicas" in result.output
        assert "(aws pricing)" in result.output
        assert "node-exporter" not in result.output
        assert "Summary: 2 workloads" in result.output

    def test_history_and_preset(self, tmp_path):
        cpu = [[START + i * 3600, 100] for i in range(8 * 24)]
        memory = [[START + i * 3600, 256 * 1024 * 1024] for i in range(8 * 24)]
        document = {"workloads": [{
            "namespace": "payments", "name": "ledger", "kind": "Deployment",
            "namespace_labels": {"environment": "dev"},
            "pods": [{"name": "ledger-1", "requested_cpu": "1", "requested_memory": "1Gi",
                      "observed_cpu": "900m", "observed_memory": "900Mi"}],
            "cpu_samples": cpu, "memory_samples": memory,
        }]}
        path = tmp_path / "scan.json"
        path.write_text(json.dumps(document))
        out = tmp_path / "recs.json"

        result = CliRunner().invoke(cli, ["recommend", str(path), "--preset", "dev",
                                          "--format", "json", "--output", str(out)])

        assert result.exit_code == 0, result.output
        rec = json.loads(out.read_text())["recommendations"][0]
        assert rec["type"] == "RIGHT_SIZE"
        assert rec["environment"] == "development"
        assert rec["has_sufficient_data"] is True
        assert "Based on 3-day P95: CPU 100m, Memory 256Mi" in rec["reason"]

    def test_bad_document_exits_1(self, tmp_path):
        path = tmp_path / "scan.yaml"
        path.write_text("workloads: 3\n")

        result = CliRunner().invoke(cli, ["recommend", str(path)])
        assert result.exit_code == 1

    def test_unknown_provider_exits_1(self, scan_file):
        result = CliRunner().invoke(cli, ["recommend", str(scan_file), "--provider", "oracle"])
        assert result.exit_code == 1


class TestStatsCommand:
    """rightsizer stats"""

    def test_series_summary(self, tmp_path):
        path = tmp_path / "series.yaml"
        path.write_text(yaml.safe_dump({"samples": [[START + i * 3600, 100 + i % 10] for i in range(400)]}))

        result = CliRunner().invoke(cli, ["stats", str(path)])

        assert result.exit_code == 0, result.output
        assert "Samples: 400" in result.output
        assert "Min: 100m" in result.output
        assert "Pattern: steady" in result.output
        assert "Seasonal:" in result.output
        assert "Growth:" in result.output

    def test_empty_series_exits_1(self, tmp_path):
        path = tmp_path / "series.yaml"
        path.write_text("samples: []\n")

        result = CliRunner().invoke(cli, ["stats", str(path)])
        assert result.exit_code == 1
