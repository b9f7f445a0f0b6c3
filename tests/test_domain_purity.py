# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""Domain modules import only the standard library, numpy and each other."""
import ast
import importlib

import pytest

_DOMAIN_MODULES = [
    "bodies",
    "closest_approach",
    "coordinate_frames",
    "ephemeris",
    "errors",
    "light_time",
    "orbital_elements",
    "orbital_mechanics",
    "planetary_terms",
    "propagation",
    "state_vector",
    "time_systems",
]


class TestDomainPurity:
    """No I/O or network libraries leak into the domain layer."""

    @pytest.mark.parametrize("name", _DOMAIN_MODULES)
    def test_imports_only_stdlib_numpy_and_domain(self, name):
        mod = importlib.import_module(f"perihelion.domain.{name}")

        allowed = {'math', 'dataclasses', 'typing', 'enum', 'logging',
                   'datetime', 'numpy'}
        with open(mod.__file__) as f:
            tree = ast.parse(f.read())

        for node in ast.walk(tree):
            if isinstance(node, ast.Import):
                for alias in node.names:
                    root = alias.name.split('.')[0]
                    if root not in allowed:
                        assert False, f"Disallowed import '{alias.name}' in {name}"
            if isinstance(node, ast.ImportFrom):
                if node.module and node.level == 0:
                    if node.module.startswith('perihelion.'):
                        assert node.module.startswith('perihelion.domain'), (
                            f"{name} imports outside the domain: {node.module}"
                        )
                        continue
                    root = node.module.split('.')[0]
                    if root not in allowed:
                        assert False, f"Disallowed import from '{node.module}' in {name}"
