"""Tests for Module 5: inverse-distance skin weights."""

import numpy as np
import pytest

from promptforge.modules.m1_prompt_parser.models import CharacterFeatures
from promptforge.modules.m2_geometry_builder import build_character_mesh
from promptforge.modules.m4_skeleton_generator import BoneConfig, BoneType, SkeletonConfig, SkeletonGenerator
from promptforge.modules.m5_skinning import compute_skin_weights, skin_mesh
from promptforge.shared.vocabulary import CharacterType


def _two_bones(weight_b: float = 1.0) -> SkeletonConfig:
    return SkeletonConfig(bones=[
        BoneConfig("root", BoneType.ROOT, (0.0, 0.0, 0.0), 0.1),
        BoneConfig("tip", BoneType.SPINE, (1.0, 0.0, 0.0), 0.1, weight=weight_b, parent="root"),
    ])


class TestComputeSkinWeights:

    def test_inverse_distance(self):
        indices, weights = compute_skin_weights(np.zeros((1, 3)), _two_bones())
        assert indices.shape == (1, 4)
        assert weights.shape == (1, 4)
        assert list(indices[0]) == [0, 1, 0, 0]
        np.testing.assert_allclose(weights[0], [2 / 3, 1 / 3, 0.0, 0.0])

    def test_base_weight_scales_score(self):
        # tip: 1.0 / (1 + 1) = 0.5 at half weight -> 0.25 vs root 1.0
        _, weights = compute_skin_weights(np.zeros((1, 3)), _two_bones(weight_b=0.5))
        np.testing.assert_allclose(weights[0, :2], [0.8, 0.2])

    def test_ties_keep_skeleton_order(self):
        indices, weights = compute_skin_weights(np.array([[0.5, 0.0, 0.0]]), _two_bones())
        assert list(indices[0, :2]) == [0, 1]
        np.testing.assert_allclose(weights[0, :2], [0.5, 0.5])

    def test_zero_weight_bones(self):
        skel = SkeletonConfig(bones=[BoneConfig("root", BoneType.ROOT, (0, 0, 0), 0.1, weight=0.0)])
        indices, weights = compute_skin_weights(np.ones((3, 3)), skel)
        np.testing.assert_array_equal(weights[:, 0], 1.0)
        np.testing.assert_array_equal(indices, 0)

    def test_root_only(self):
        skel = SkeletonGenerator().generate(CharacterType.OBJECT)
        _, weights = compute_skin_weights(np.random.default_rng(0).normal(size=(20, 3)), skel)
        np.testing.assert_array_equal(weights[:, 0], 1.0)
        np.testing.assert_array_equal(weights[:, 1:], 0.0)

    def test_empty_skeleton(self):
        with pytest.raises(ValueError):
            compute_skin_weights(np.zeros((1, 3)), SkeletonConfig())

    def test_full_rig_normalised(self):
        skel = SkeletonGenerator().generate(CharacterType.HUMANOID)
        verts = np.random.default_rng(3).uniform(-1.5, 1.5, size=(200, 3))
        indices, weights = compute_skin_weights(verts, skel)
        np.testing.assert_allclose(weights.sum(axis=1), 1.0)
        assert np.all(weights >= 0)
        assert np.all(np.count_nonzero(weights, axis=1) <= 4)
        assert indices.max() < len(skel)
        # influences are sorted best-first
        assert np.all(np.diff(weights, axis=1) <= 1e-12)


class TestSkinMesh:

    @pytest.mark.parametrize("ctype", list(CharacterType))
    def test_body_meshes(self, ctype):
        features = CharacterFeatures(has_tail=True)
        skel = SkeletonGenerator().generate(ctype, features)
        mesh = build_character_mesh(ctype, features)
        skinned = skin_mesh(mesh, skel)
        assert skinned.skin_indices.shape == (mesh.vertex_count, 4)
        assert skinned.bone_names == skel.names
        assert skinned.mesh is mesh
        np.testing.assert_allclose(skinned.skin_weights.sum(axis=1), 1.0)
        assert skinned.influence_counts.max() <= 4

    def test_head_vertices_follow_head(self):
        skel = SkeletonGenerator().generate(CharacterType.HUMANOID)
        head = np.array([skel.bone("head").position])
        indices, _ = compute_skin_weights(head, skel)
        assert skel.names[indices[0, 0]] == "head"
