"""Pytest configuration for tests.

No sys.path hacks - tests should import from installed crdremap package.
"""

import copy

import pytest


V1 = "apiextensions.k8s.io/v1"


def make_crd(versions=None, conditions=None, api_version=V1, name="widgets.example.com"):
    """Build a CRD document; versions/conditions of None omit the section."""
    crd = {
        "apiVersion": api_version,
        "kind": "CustomResourceDefinition",
        "metadata": {"name": name, "uid": "3b1f0c1e"},
        "spec": {
            "group": "example.com",
            "names": {"kind": "Widget", "plural": "widgets"},
            "scope": "Namespaced",
        },
    }
    if versions is not None:
        crd["spec"]["versions"] = versions
    if conditions is not None:
        crd["status"] = {"conditions": conditions}
    return crd


@pytest.fixture
def structural_crd():
    """A modern CRD with a full schema and an Established condition."""
    return make_crd(
        versions=[{
            "name": "v1",
            "served": True,
            "storage": True,
            "schema": {"openAPIV3Schema": {"type": "object", "properties": {"spec": {"type": "object"}}}},
        }],
        conditions=[{"type": "Established", "status": "True", "reason": "InitialNamesAccepted"}],
    )


@pytest.fixture
def crd_factory():
    """Return make_crd with deep-copied arguments so tests never share state."""
    def _factory(*args, **kwargs):
        return copy.deepcopy(make_crd(*args, **kwargs))
    return _factory
