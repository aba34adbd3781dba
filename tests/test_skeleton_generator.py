"""Tests for Module 4: skeleton topologies and integrity checks."""

import pytest

from promptforge.modules.m1_prompt_parser.models import CharacterFeatures
from promptforge.modules.m4_skeleton_generator import (
    BoneConfig,
    BoneType,
    SkeletonConfig,
    SkeletonGenerator,
    mirror_bone,
)
from promptforge.shared.vocabulary import CharacterType


class TestSkeletonGenerator:

    def setup_method(self):
        self.gen = SkeletonGenerator()

    def test_humanoid(self):
        skel = self.gen.generate(CharacterType.HUMANOID)
        assert len(skel) == 21
        assert skel.root.name == "root"
        assert skel.symmetrical is True
        for name in ("spine", "chest", "neck", "head", "hand_l", "hand_r", "foot_l", "foot_r"):
            assert skel.has_bone(name), name
        assert skel.validate() == []

    def test_humanoid_wings(self):
        skel = self.gen.generate(CharacterType.HUMANOID, CharacterFeatures(has_wings=True))
        assert len(skel) == 23
        assert skel.bone("wing_r").parent == "chest"

    def test_creature_variants(self):
        assert len(self.gen.generate(CharacterType.CREATURE)) == 18
        six = self.gen.generate(CharacterType.CREATURE, CharacterFeatures(limb_count=6))
        assert len(six) == 24
        assert six.bone("leg_mid_upper_r").parent == "spine"

        tailed = self.gen.generate(CharacterType.CREATURE, CharacterFeatures(has_tail=True, has_wings=True))
        assert [b.name for b in tailed.bones if b.type is BoneType.TAIL] == ["tail_base", "tail_mid", "tail_tip"]
        assert tailed.has_bone("wing_l") and tailed.has_bone("wing_r")
        assert tailed.bone("tail_tip").weight == pytest.approx(0.3)

    @pytest.mark.parametrize("ctype", [CharacterType.OBJECT, CharacterType.CUSTOM])
    def test_root_only(self, ctype):
        skel = self.gen.generate(ctype)
        assert skel.names == ["root"]
        assert skel.symmetrical is False
        assert skel.bones[0].rotation == (0.0, 0.0, 0.0)

    def test_height_scales_positions(self):
        unit = self.gen.generate(CharacterType.HUMANOID, height=2.0)
        tall = self.gen.generate(CharacterType.HUMANOID, height=4.0)
        assert tall.bone("head").position == pytest.approx((0.0, 2.1, 0.0))
        assert tall.bone("head").length == pytest.approx(unit.bone("head").length * 2)

    def test_right_side_mirrors_left(self):
        skel = self.gen.generate(CharacterType.CREATURE, CharacterFeatures(has_tail=True))
        for bone in skel.bones:
            if bone.side != "l":
                continue
            twin = skel.bone(bone.name[:-2] + "_r")
            assert twin is not None
            assert twin.position == pytest.approx((-bone.position[0], bone.position[1], bone.position[2]))
            assert twin.weight == bone.weight
            assert twin.type is bone.type

    def test_parents_precede_children(self):
        skel = self.gen.generate(CharacterType.HUMANOID, CharacterFeatures(has_wings=True))
        seen = set()
        for bone in skel.bones:
            assert bone.parent is None or bone.parent in seen, bone.name
            seen.add(bone.name)

    def test_bad_height(self):
        with pytest.raises(ValueError):
            self.gen.generate(CharacterType.HUMANOID, height=0.0)


class TestSkeletonValidation:

    def test_empty(self):
        assert SkeletonConfig().validate() == ["skeleton has no bones"]

    def test_duplicates_and_orphans(self):
        skel = SkeletonConfig(bones=[
            BoneConfig("root", BoneType.ROOT, (0, 0, 0), 0.1),
            BoneConfig("spine", BoneType.SPINE, (0, 1, 0), 0.3, parent="root"),
            BoneConfig("spine", BoneType.SPINE, (0, 1, 0), 0.3, parent="root"),
            BoneConfig("arm", BoneType.ARM_UPPER, (0, 1, 0), 0.3, parent="ghost"),
        ])
        problems = skel.validate()
        assert any("duplicate" in p for p in problems)
        assert any("unknown parent ghost" in p for p in problems)

    def test_two_roots(self):
        skel = SkeletonConfig(bones=[
            BoneConfig("a", BoneType.ROOT, (0, 0, 0), 0.1),
            BoneConfig("b", BoneType.ROOT, (0, 0, 0), 0.1),
        ])
        assert skel.root is None
        assert any("exactly one root" in p for p in skel.validate())

    def test_cycle(self):
        skel = SkeletonConfig(bones=[
            BoneConfig("root", BoneType.ROOT, (0, 0, 0), 0.1),
            BoneConfig("a", BoneType.SPINE, (0, 0, 0), 0.1, parent="b"),
            BoneConfig("b", BoneType.SPINE, (0, 0, 0), 0.1, parent="a"),
        ])
        assert any("cycle" in p for p in skel.validate())

    def test_weight_range(self):
        skel = SkeletonConfig(bones=[BoneConfig("root", BoneType.ROOT, (0, 0, 0), 0.1, weight=1.5)])
        assert any("weight" in p for p in skel.validate())


class TestMirrorBone:

    def test_mirror(self):
        bone = BoneConfig("arm_upper_l", BoneType.ARM_UPPER, (-0.4, 0.85, 0.1), 0.3, 0.9, "shoulder_l")
        twin = mirror_bone(bone)
        assert twin.name == "arm_upper_r"
        assert twin.parent == "shoulder_r"
        assert twin.position == (0.4, 0.85, 0.1)
        assert twin.weight == 0.9

    def test_centre_parent_kept(self):
        bone = BoneConfig("shoulder_l", BoneType.SHOULDER, (-0.2, 0.85, 0.0), 0.1, parent="chest")
        assert mirror_bone(bone).parent == "chest"
