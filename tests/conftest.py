"""Pytest fixtures for calcify tests."""

import shutil
import tempfile
from dataclasses import dataclass
from typing import Any, ClassVar

import numpy as np
import pytest

# Add src to path for imports
import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from containers import FeedTree, Tree
from values import Bin, Collection, Point, Serializable


@dataclass
class Particle(Serializable):
    """Opaque, caller-defined element type used across the tests."""

    type_tag: ClassVar[str] = "Particle"

    pid: int
    mass: float
    position: Point

    def to_json_value(self) -> dict:
        return {"pid": self.pid, "mass": self.mass, "position": self.position.to_json_value()}

    def to_jsonc_value(self) -> list:
        return [self.pid, self.mass, self.position.to_jsonc_value()]

    @classmethod
    def from_json_value(cls, obj: Any) -> "Particle":
        return cls(obj["pid"], float(obj["mass"]), Point.from_json_value(obj["position"]))


@pytest.fixture
def seed():
    """Seeded numpy Generator for reproducibility."""
    return np.random.default_rng(42)


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    temp = tempfile.mkdtemp()
    yield Path(temp)
    shutil.rmtree(temp, ignore_errors=True)


@pytest.fixture
def particle_cls():
    return Particle


@pytest.fixture
def particles(seed):
    """A handful of Particles at random positions."""
    return [Particle(i, 1.0 + i, Point.random(10.0, seed)) for i in range(5)]


@pytest.fixture
def sample_tree(seed):
    """Tree holding every built-in, tree-decodable element type."""
    radii = Collection(seed.normal(5.0, 1.0, size=200).tolist())
    points = Collection.plot(range(20), [x * x for x in range(20)])

    tree = Tree("run_42")
    tree.add_field("desc", "baseline run")
    tree.add_field("steps", 200)
    tree.add_field("dt", 0.01)
    tree.add_field("converged", True)
    tree.add_branch("radius", radii, "f64")
    tree.add_branch("hits", [3, 0, 7, 12], "u64")
    tree.add_branch("labels", ["a", "b", "é"], "String")
    tree.add_branch("radius_hist", radii.hist(10))
    tree.add_branch("trajectory", points)
    tree.add_branch("density", points.hist2d(3, 4))
    return tree


@pytest.fixture
def sample_feedtree(particles):
    """FeedTree with scalar, built-in and opaque feeds."""
    feedtree = FeedTree("snapshots")
    feedtree.add_field("dt", 0.01)
    feedtree.add_field("integrator", "leapfrog")
    feedtree.add_feed("energy", [1.0, 0.99, 0.98], "f64")
    feedtree.add_feed("step", [0, 1, 2])
    feedtree.add_feed("bins", [Bin(0.0, 1.0, 3), Bin(1.0, 2.0, 5)])
    feedtree.add_feed("centre", [Point(0.0, 0.0), Point(0.5, -0.5)])
    feedtree.add_feed("particles", particles)
    return feedtree
