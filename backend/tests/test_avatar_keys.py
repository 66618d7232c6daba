"""
VendorBridge Backend — Avatar Key Scheme Tests
================================================

Pure tests for key building, AvatarKey encode/decode and latest-version
resolution. No storage involved.
"""

import pytest

from app.exceptions import NotFoundError, UserInputError
from app.services.avatar_keys import (
    AvatarKey,
    AvatarKeys,
    StoredObject,
    sanitize_original_name,
)


def _listing(*names):
    return [StoredObject.from_name(name) for name in names]


class TestKeyBuilding:

    def setup_method(self):
        self.keys = AvatarKeys(folder="avatars", clock=lambda: 1_700_000_000_000)

    def test_key_for_upload_embeds_timestamp_and_name(self):
        assert self.keys.key_for_upload("photo.jpg") == "avatars/1700000000000_photo.jpg"

    @pytest.mark.parametrize("name", ["photo.jpg", "my avatar.png", "a_b_c.webp", "x", " photo.jpg"])
    def test_key_for_upload_suffix_is_underscore_name(self, name):
        key = AvatarKeys().key_for_upload(name)
        assert key.startswith("avatars/")
        assert key.endswith("_" + name)
        prefix = key[len("avatars/"):-len("_" + name)]
        assert prefix.isdigit()
        assert int(prefix) >= 0

    def test_key_for_upload_uses_real_clock_by_default(self):
        first = AvatarKey.decode(AvatarKeys().key_for_upload("a.jpg")).timestamp
        assert first is not None and first > 1_600_000_000_000

    def test_key_for_upload_strips_path_separators(self):
        key = self.keys.key_for_upload("../../etc/passwd")
        assert key == "avatars/1700000000000_.._.._etc_passwd"
        assert key.count("/") == 1

    def test_key_for_upload_backslashes(self):
        assert self.keys.key_for_upload("dir\\pic.png").endswith("_dir_pic.png")

    def test_key_for_upload_rejects_empty_name(self):
        with pytest.raises(UserInputError):
            self.keys.key_for_upload("   ")

    @pytest.mark.parametrize("user_id", ["42", "user-abc", "550e8400-e29b-41d4", "with_underscore"])
    def test_key_for_user(self, user_id):
        assert self.keys.key_for_user(user_id) == "avatars/" + user_id + ".jpg"

    def test_key_for_user_rejects_empty(self):
        with pytest.raises(UserInputError) as exc_info:
            self.keys.key_for_user("")
        assert exc_info.value.field == "userId"

    def test_custom_folder(self):
        keys = AvatarKeys(folder="/profile-pics/", clock=lambda: 5)
        assert keys.key_for_user("7") == "profile-pics/7.jpg"
        assert keys.key_for_upload("a.png") == "profile-pics/5_a.png"


class TestAvatarKeyCodec:

    def test_decode_timestamped(self):
        key = AvatarKey.decode("avatars/200_photo.jpg")
        assert key == AvatarKey("avatars", "photo.jpg", timestamp=200)
        assert key.encode() == "avatars/200_photo.jpg"

    def test_decode_fixed_name(self):
        key = AvatarKey.decode("avatars/42.jpg")
        assert key == AvatarKey("avatars", "42", extension="jpg")
        assert key.encode() == "avatars/42.jpg"

    def test_decode_non_numeric_prefix_has_no_timestamp(self):
        key = AvatarKey.decode("avatars/abc_photo.jpg")
        assert key.timestamp is None
        assert key.logical_name == "abc_photo"

    def test_decode_keeps_underscores_after_first(self):
        key = AvatarKey.decode("avatars/10_my_photo.jpg")
        assert key.timestamp == 10
        assert key.logical_name == "my_photo.jpg"

    def test_decode_name_without_extension(self):
        assert AvatarKey.decode("avatars/README") == AvatarKey("avatars", "README")

    def test_sanitize_original_name(self):
        assert sanitize_original_name("a/b\\c.jpg") == "a_b_c.jpg"

    def test_sanitize_keeps_surrounding_spaces(self):
        assert sanitize_original_name(" photo.jpg ") == " photo.jpg "

    def test_numeric_user_id_reads_back_as_timestamped(self):
        encoded = AvatarKey("avatars", "5_photo", extension="jpg").encode()
        assert encoded == "avatars/5_photo.jpg"
        assert AvatarKey.decode(encoded).timestamp == 5


class TestResolveLatest:

    def setup_method(self):
        self.keys = AvatarKeys(folder="avatars")

    def test_picks_highest_timestamp(self):
        listing = _listing("avatars/100_photo.jpg", "avatars/200_photo.jpg", "avatars/50_other.jpg")
        assert self.keys.resolve_latest(listing, "photo.jpg").name == "avatars/200_photo.jpg"

    def test_input_order_does_not_matter(self):
        listing = _listing("avatars/200_photo.jpg", "avatars/50_other.jpg", "avatars/100_photo.jpg")
        assert self.keys.resolve_latest(listing, "photo.jpg").name == "avatars/200_photo.jpg"

    def test_compares_numerically_not_lexicographically(self):
        listing = _listing("avatars/9_photo.jpg", "avatars/10_photo.jpg")
        assert self.keys.resolve_latest(listing, "photo.jpg").name == "avatars/10_photo.jpg"

    def test_empty_listing_is_not_found(self):
        with pytest.raises(NotFoundError):
            self.keys.resolve_latest([], "photo.jpg")

    def test_no_match_is_not_found(self):
        with pytest.raises(NotFoundError):
            self.keys.resolve_latest(_listing("avatars/50_other.jpg"), "photo.jpg")

    def test_malformed_prefix_ranks_below_numeric(self):
        listing = _listing("avatars/abc_photo.jpg", "avatars/10_photo.jpg")
        assert self.keys.resolve_latest(listing, "photo.jpg").name == "avatars/10_photo.jpg"

    def test_partial_numeric_prefix_ranks_lowest(self):
        listing = _listing("avatars/12abc_photo.jpg", "avatars/3_photo.jpg")
        assert AvatarKey.decode("avatars/12abc_photo.jpg").timestamp is None
        assert self.keys.resolve_latest(listing, "photo.jpg").name == "avatars/3_photo.jpg"

    def test_malformed_only_still_resolves(self):
        listing = _listing("avatars/abc_photo.jpg")
        assert self.keys.resolve_latest(listing, "photo.jpg").name == "avatars/abc_photo.jpg"

    def test_equal_timestamps_break_ties_on_name(self):
        listing = _listing("avatars/100_photo.jpg", "avatars/100_old_photo.jpg")
        result = self.keys.resolve_latest(listing, "photo.jpg")
        assert result.name == "avatars/100_photo.jpg"
        reversed_result = self.keys.resolve_latest(list(reversed(listing)), "photo.jpg")
        assert reversed_result.name == result.name

    def test_is_idempotent(self):
        listing = _listing("avatars/100_photo.jpg", "avatars/300_photo.jpg", "avatars/abc_photo.jpg")
        first = self.keys.resolve_latest(listing, "photo.jpg")
        second = self.keys.resolve_latest(listing, "photo.jpg")
        assert first == second

    def test_sanitizes_lookup_name_like_uploads(self):
        uploaded = AvatarKeys(clock=lambda: 77).key_for_upload("dir/pic.png")
        result = self.keys.resolve_latest(_listing(uploaded), "dir/pic.png")
        assert result.name == uploaded


class TestPreviousUploads:

    def setup_method(self):
        self.keys = AvatarKeys(folder="avatars")

    def test_only_exact_timestamped_copies(self):
        listing = _listing(
            "avatars/1699999999000_photo.jpg",
            "avatars/1699999999500_photo.jpg",
            "avatars/1699999999700_my_photo.jpg",
            "avatars/x_photo.jpg",
            "avatars/42.jpg",
        )
        names = [obj.name for obj in self.keys.previous_uploads(listing, "photo.jpg")]
        assert names == ["avatars/1699999999000_photo.jpg", "avatars/1699999999500_photo.jpg"]

    def test_fixed_name_avatar_is_not_a_copy(self):
        # userId "5_photo" owns avatars/5_photo.jpg
        listing = _listing("avatars/5_photo.jpg", "avatars/123_photo.jpg")
        assert self.keys.previous_uploads(listing, "photo.jpg") == []

    def test_later_copies_are_kept(self):
        listing = _listing("avatars/1699999999000_photo.jpg", "avatars/1700000000001_photo.jpg")
        found = self.keys.previous_uploads(listing, "photo.jpg", before=1_700_000_000_000)
        assert [obj.name for obj in found] == ["avatars/1699999999000_photo.jpg"]

    def test_other_folder_ignored(self):
        listing = _listing("elsewhere/1699999999000_photo.jpg")
        assert self.keys.previous_uploads(listing, "photo.jpg") == []
