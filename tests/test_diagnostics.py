"""Tests for tree-vs-direct force diagnostics."""

import importlib.util
import json
import warnings
from pathlib import Path

import numpy as np
import pytest

from celestial.config import OctreeConfig
from celestial.ICs import PlummerSphere, UniformSphere
from celestial.io import ForceComparison, compare_with_direct, relative_errors


class TestRelativeErrors:

    def test_relative_errors(self):
        exact = np.array([[1.0, 0.0, 0.0], [0.0, 2.0, 0.0], [0.0, 0.0, 0.0]])
        approx = np.array([[1.1, 0.0, 0.0], [0.0, 2.0, 0.0], [0.5, 0.0, 0.0]])
        np.testing.assert_allclose(relative_errors(approx, exact), [0.1, 0.0, 0.0], atol=1e-12)


class TestCompareWithDirect:

    def test_theta_zero_agrees(self):
        positions, _, masses = UniformSphere(random_seed=5).generate(100)
        result = compare_with_direct(positions, masses, theta=0.0)

        assert isinstance(result, ForceComparison)
        assert result.n_bodies == 100
        assert result.max_relative_error < 1e-9
        assert result.node_count >= 100
        assert result.tree_depth >= 3

    def test_error_grows_with_theta(self):
        positions, _, masses = PlummerSphere(random_seed=5).generate(300)
        fine = compare_with_direct(positions, masses, theta=0.3, softening=0.01)
        coarse = compare_with_direct(positions, masses, theta=0.8, softening=0.01)

        assert fine.mean_relative_error < coarse.mean_relative_error
        assert coarse.median_relative_error < 0.1

    def test_as_dict(self):
        positions, _, masses = UniformSphere(random_seed=5).generate(20)
        data = compare_with_direct(positions, masses).as_dict()
        for key in ("n_bodies", "theta", "max_relative_error", "mean_relative_error",
                    "median_relative_error", "tree_time", "direct_time", "node_count",
                    "tree_depth", "speedup"):
            assert key in data

    def test_config_sets_tree_parameters(self):
        positions, _, masses = UniformSphere(random_seed=5).generate(100)
        config = OctreeConfig(root_extent=8.0, max_depth=3, theta=0.4)
        with warnings.catch_warnings():
            warnings.simplefilter("ignore", RuntimeWarning)
            result = compare_with_direct(positions, masses, theta=0.9, config=config)

        assert result.theta == 0.4
        assert result.tree_depth <= 3

    def test_config_without_root_extent_sizes_from_bodies(self):
        positions, _, masses = UniformSphere(radius=3.0, random_seed=5).generate(50)
        config = OctreeConfig(theta=0.1)
        with warnings.catch_warnings():
            warnings.simplefilter("error", UserWarning)
            result = compare_with_direct(positions, masses, config=config)
        assert result.median_relative_error < 1e-2

    def test_empty_input(self):
        with pytest.raises(ValueError):
            compare_with_direct(np.zeros((0, 3)), np.zeros(0))


def _load_script():
    path = Path(__file__).parent.parent / "scripts" / "compare_solvers.py"
    spec = importlib.util.spec_from_file_location("compare_solvers", path)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


class TestCompareSolversScript:

    def test_json_output(self, capsys):
        script = _load_script()
        assert script.main(["--bodies", "60", "--theta", "0.4", "--json"]) == 0

        data = json.loads(capsys.readouterr().out)
        assert data["n_bodies"] == 60
        assert data["theta"] == 0.4

    def test_text_output_with_config(self, tmp_path, capsys):
        cfg = tmp_path / "tree.yaml"
        cfg.write_text("gravity:\n  theta: 0.6\n  softening: 0.05\n")

        script = _load_script()
        assert script.main(["-n", "40", "--model", "plummer", "--config", str(cfg)]) == 0

        out = capsys.readouterr().out
        assert "Theta:           0.6" in out
        assert "Max rel. error" in out

    def test_config_tree_section_is_applied(self, tmp_path, capsys):
        cfg = tmp_path / "tree.yaml"
        cfg.write_text("tree:\n  root_extent: 50.0\n  max_depth: 2\n")

        script = _load_script()
        with warnings.catch_warnings():
            warnings.simplefilter("ignore", RuntimeWarning)
            assert script.main(["-n", "200", "--config", str(cfg), "--json"]) == 0

        data = json.loads(capsys.readouterr().out)
        assert data["n_bodies"] == 200
        assert data["tree_depth"] <= 2
