import pytest

from tswitch.api.spec import (
    ComputeInstanceSpec,
    MetalSpec,
    NetworkSpec,
    Partition,
    RaidArray,
    VolumeSpec,
)
from tswitch.errors import ValidationFailed
from tswitch.validation import ensure_valid, validate

pytestmark = [pytest.mark.unit]


def _compute(**overrides) -> ComputeInstanceSpec:
    values = dict(region_id="PIT1", tier_id="cc-2x4", display_name="web", boot_size=20, ssh_key_ids=(588,))
    return ComputeInstanceSpec(**(values | overrides))


def _paths(spec) -> set[str]:
    return {e.path for e in validate(spec)}


class TestCompute:
    def test_valid(self):
        assert validate(_compute()) == []

    def test_password_instead_of_keys(self):
        assert validate(_compute(ssh_key_ids=(), password="hunter2")) == []

    def test_needs_credentials(self):
        assert _paths(_compute(ssh_key_ids=())) == {"ssh_key_ids"}

    def test_reports_every_problem(self):
        paths = _paths(_compute(region_id="", boot_size=0, desired_power_state="Sleeping"))
        assert paths == {"region_id", "boot_size", "desired_power_state"}


class TestMetal:
    def test_template_carries_credentials(self):
        assert validate(MetalSpec(region_id="PIT1", tier_id="t", template_id=9)) == []

    def test_needs_credentials_without_template(self):
        assert _paths(MetalSpec(region_id="PIT1", tier_id="t")) == {"ssh_key_ids"}

    def test_partition_checks(self):
        spec = MetalSpec(
            region_id="PIT1", tier_id="t", password="p",
            partitions=(Partition(name="root", device="", file_system="Ntfs", mount_point="/", size_bytes=-1),),
        )
        assert _paths(spec) == {
            "partitions[0].device", "partitions[0].file_system", "partitions[0].size_bytes",
        }

    def test_raid_checks(self):
        spec = MetalSpec(
            region_id="PIT1", tier_id="t", password="p",
            raid_arrays=(RaidArray(name="md0", type="Raid5", members=(), file_system="Xfs", mount_point="/data"),),
        )
        assert _paths(spec) == {"raid_arrays[0].members", "raid_arrays[0].type"}


class TestNetwork:
    def test_valid(self):
        assert validate(NetworkSpec(region_id="PIT1", v4_subnet="10.0.0.0", v4_subnet_mask="255.255.255.0")) == []

    def test_bad_addresses(self):
        spec = NetworkSpec(region_id="PIT1", v4_subnet="10.0.0", v4_subnet_mask="255.0.255.0")
        assert _paths(spec) == {"v4_subnet", "v4_subnet_mask"}


class TestVolume:
    def test_size_must_be_positive(self):
        spec = VolumeSpec(region_id="PIT1", display_name="data", volume_type="nvme", size=0)
        assert _paths(spec) == {"size"}


def test_ensure_valid_raises_with_all_errors():
    with pytest.raises(ValidationFailed) as exc_info:
        ensure_valid(_compute(tier_id="", ssh_key_ids=()))
    assert exc_info.value.kind == "compute"
    assert {e.path for e in exc_info.value.errors} == {"tier_id", "ssh_key_ids"}


def test_validate_rejects_non_specs():
    with pytest.raises(TypeError):
        validate(object())


class TestWrongTypes:
    """Values decoded from TOML can carry any type; they become field errors."""

    def test_string_boot_size(self):
        errors = validate(_compute(boot_size="20"))
        assert [(e.path, e.message) for e in errors] == [("boot_size", "must be an integer, got str")]

    def test_bool_is_not_a_size(self):
        assert _paths(_compute(boot_size=True)) == {"boot_size"}

    def test_non_string_required_fields(self):
        assert _paths(_compute(region_id=1, display_name=None)) == {"region_id", "display_name"}

    def test_non_string_power_state(self):
        assert _paths(_compute(desired_power_state=["On"])) == {"desired_power_state"}

    def test_string_ssh_key_id(self):
        assert _paths(_compute(ssh_key_ids=("588",))) == {"ssh_key_ids[0]"}

    def test_metal_layout_types(self):
        spec = MetalSpec(
            region_id="PIT1", tier_id="t", password="p", memory_gb="64",
            partitions=(Partition(name="root", device=0, file_system="Ext4", mount_point="/"),),
            raid_arrays=(RaidArray(name="md0", type="Raid1", members=("sda", 2), file_system="Xfs",
                                   mount_point="/data", size_bytes="1g"),),
        )
        assert _paths(spec) == {
            "memory_gb", "partitions[0].device", "raid_arrays[0].members[1]", "raid_arrays[0].size_bytes",
        }

    def test_network_non_string_subnet(self):
        spec = NetworkSpec(region_id="PIT1", v4_subnet=167772160, v4_subnet_mask="255.255.255.0")
        assert _paths(spec) == {"v4_subnet"}

    def test_string_volume_size(self):
        spec = VolumeSpec(region_id="PIT1", display_name="data", volume_type="nvme", size="100")
        assert _paths(spec) == {"size"}
