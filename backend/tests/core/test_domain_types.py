"""Domain Types — verifies branch tags, view angles, and value object behavior.

Tests:
    - Branch has exactly three members serializing to lowercase strings
    - Multi-concept branches have exactly 3 uniquely-named angles, Event has none
    - GeneratedImage renders a data URL
    - Value objects are frozen
"""

import dataclasses

import pytest

from concept_studio.core.domain_types import (
    EXHIBITION_ANGLES, INTERIOR_ANGLES, Branch, Concept, GeneratedImage,
    IdentityEmail, angles_for,
)


def test_branch_has_three_strategies():
    assert {b.value for b in Branch} == {"exhibition", "interior", "event"}


def test_only_event_has_no_concepts():
    assert Branch.EXHIBITION.has_concepts
    assert Branch.INTERIOR.has_concepts
    assert not Branch.EVENT.has_concepts


@pytest.mark.parametrize("branch", [Branch.EXHIBITION, Branch.INTERIOR])
def test_multi_concept_branches_have_three_unique_angles(branch):
    angles = angles_for(branch)
    assert len(angles) == 3
    assert len({a.id for a in angles}) == 3
    assert all(a.instruction for a in angles)


def test_angle_order_is_fixed():
    assert [a.id for a in EXHIBITION_ANGLES] == ["front", "aerial", "interior"]
    assert [a.id for a in INTERIOR_ANGLES] == ["wide", "perspective", "detail"]


def test_event_has_no_angles():
    assert angles_for(Branch.EVENT) == ()


def test_generated_image_data_url():
    image = GeneratedImage(data="abc", mime_type="image/jpeg")
    assert image.data_url == "data:image/jpeg;base64,abc"


def test_value_objects_are_frozen():
    concept = Concept("Title", "Description")
    with pytest.raises(dataclasses.FrozenInstanceError):
        concept.title = "Other"


def test_identity_email_wraps_str():
    assert IdentityEmail("a@b.co") == "a@b.co"
