"""Unit tests for invite code generation."""

import string

import pytest

from eduquest.social.invite_codes import (
    INVITE_CHARSET,
    INVITE_LENGTH,
    generate_invite_code,
    generate_unique_invite_code,
    normalize_invite_code,
)


class TestInviteCodes:
    """Test invite code generation."""

    def test_code_is_8_chars(self):
        code = generate_invite_code()
        assert len(code) == INVITE_LENGTH
        assert len(code) == 8

    def test_code_is_alphanumeric_uppercase(self):
        code = generate_invite_code()
        assert all(c in string.ascii_uppercase + string.digits for c in code)

    def test_code_charset_is_correct(self):
        assert INVITE_CHARSET == string.ascii_uppercase + string.digits

    def test_codes_are_unique(self):
        codes = {generate_invite_code() for _ in range(1000)}
        assert len(codes) == 1000

    @pytest.mark.parametrize("raw", ["abc12345", "Abc12345", " ABC12345 "])
    def test_normalize_invite_code(self, raw):
        assert normalize_invite_code(raw) == "ABC12345"

    @pytest.mark.asyncio
    async def test_unique_code_avoids_existing_groups(self, storage, user):
        from eduquest.social.group_service import create_group

        group = await create_group(storage, user.id, "Night Owls")
        code = await generate_unique_invite_code(storage)
        assert code != group.invite_code
        assert len(code) == INVITE_LENGTH
