import pytest

from docnotes.core.errors import NotFoundError, ValidationFailedError
from docnotes.domains.documents import blocks as block_model
from docnotes.domains.documents.blocks import (
    DocumentContent, ImageBlock, TextBlock, is_storage_reference, parse_content
)


def text(block_id, content=""):
    return TextBlock(id=block_id, content=content)


def ids(blocks):
    return [block.id for block in blocks]


@pytest.fixture
def abcd():
    return [text("A"), text("B"), text("C"), text("D")]


class TestMoveBlock:

    def test_move_keeps_relative_order(self, abcd):
        assert ids(block_model.move_block(abcd, 0, 2)) == ["B", "C", "A", "D"]

    def test_move_backwards(self, abcd):
        assert ids(block_model.move_block(abcd, 3, 1)) == ["A", "D", "B", "C"]

    def test_move_to_same_index_is_noop(self, abcd):
        assert ids(block_model.move_block(abcd, 2, 2)) == ["A", "B", "C", "D"]

    def test_source_list_not_modified(self, abcd):
        block_model.move_block(abcd, 0, 3)
        assert ids(abcd) == ["A", "B", "C", "D"]

    @pytest.mark.parametrize("from_index,to_index", [(4, 0), (0, 4), (-1, 0)])
    def test_out_of_range(self, abcd, from_index, to_index):
        with pytest.raises(ValidationFailedError):
            block_model.move_block(abcd, from_index, to_index)


class TestInsertBlock:

    def test_append_text_block(self, abcd):
        new_blocks, new_block = block_model.insert_block(abcd, "text")

        assert new_blocks[-1] is new_block
        assert new_block.type == "text"
        assert new_block.content == ""
        assert len(abcd) == 4

    def test_image_block_defaults(self):
        _, new_block = block_model.insert_block([], "image")

        assert new_block.content == ""
        assert new_block.metadata.position.model_dump() == {"x": 0, "y": 0}
        assert new_block.metadata.size.model_dump() == {"width": 300, "height": 200}

    def test_insert_at_index(self, abcd):
        new_blocks, new_block = block_model.insert_block(abcd, "text", at_index=1)
        assert ids(new_blocks) == ["A", new_block.id, "B", "C", "D"]

    def test_generated_ids_are_unique(self):
        blocks = []
        for _ in range(20):
            blocks, _ = block_model.insert_block(blocks, "text")
        assert len(set(ids(blocks))) == 20

    def test_unknown_type(self):
        with pytest.raises(ValidationFailedError):
            block_model.insert_block([], "video")

    def test_index_out_of_range(self, abcd):
        with pytest.raises(ValidationFailedError):
            block_model.insert_block(abcd, "text", at_index=5)


class TestUpdateBlock:

    def test_merge_content(self, abcd):
        new_blocks = block_model.update_block(abcd, "B", {"content": "hello"})

        assert new_blocks[1].content == "hello"
        assert abcd[1].content == ""

    def test_type_is_immutable(self, abcd):
        with pytest.raises(ValidationFailedError):
            block_model.update_block(abcd, "A", {"type": "image"})

    def test_same_type_is_allowed(self, abcd):
        new_blocks = block_model.update_block(abcd, "A", {"type": "text", "content": "x"})
        assert new_blocks[0].content == "x"

    def test_missing_block(self, abcd):
        with pytest.raises(NotFoundError):
            block_model.update_block(abcd, "Z", {"content": "x"})

    def test_metadata_merge_keeps_other_fields(self):
        blocks = [ImageBlock(id="img")]
        new_blocks = block_model.update_block(blocks, "img", {"metadata": {"alt": "cat.png"}})

        metadata = new_blocks[0].metadata
        assert metadata.alt == "cat.png"
        assert metadata.size.width == 300

    def test_image_content_must_be_reference(self):
        blocks = [ImageBlock(id="img")]
        with pytest.raises(ValidationFailedError):
            block_model.update_block(blocks, "img", {"content": "not a path"})


class TestDeleteBlock:

    def test_delete(self, abcd):
        assert ids(block_model.delete_block(abcd, "C")) == ["A", "B", "D"]

    def test_delete_missing(self, abcd):
        with pytest.raises(NotFoundError):
            block_model.delete_block(abcd, "Z")


class TestContent:

    def test_parse_none_is_empty(self):
        assert parse_content(None).blocks == []

    def test_discriminated_union(self):
        content = parse_content({"blocks": [
            {"id": "a", "type": "text", "content": "hi"},
            {"id": "b", "type": "image", "content": "u1/d1/b.png"}
        ]})
        assert isinstance(content.blocks[0], TextBlock)
        assert isinstance(content.blocks[1], ImageBlock)

    @pytest.mark.parametrize("raw", [
        {"blocks": [{"id": "a", "type": "table"}]},
        {"blocks": [{"id": "a", "type": "text"}, {"id": "a", "type": "text"}]},
        {"blocks": [{"type": "text"}]},
        {"blocks": [{"id": "a", "type": "text", "color": "red"}]},
        {"items": []},
    ])
    def test_malformed_content_rejected(self, raw):
        with pytest.raises(ValidationFailedError):
            parse_content(raw)

    def test_text_projection_skips_images(self):
        content = DocumentContent(blocks=[
            text("a", "First"), ImageBlock(id="b", content="x.png"), text("c", "Second")
        ])
        assert block_model.text_projection(content) == "First\nSecond"

    def test_check_types_unchanged(self):
        old = DocumentContent(blocks=[text("a")])
        new = DocumentContent(blocks=[ImageBlock(id="a")])
        with pytest.raises(ValidationFailedError):
            block_model.check_types_unchanged(old, new)


@pytest.mark.parametrize("value,expected", [
    ("https://cdn.example.com/a/b.png", True),
    ("http://localhost/x.png", True),
    ("/media/u/d/b.png", True),
    ("u/d/b.png", True),
    ("ftp://host/x.png", False),
    ("https:///nohost.png", False),
    ("../etc/passwd", False),
    ("a/../../b.png", False),
    ("with space.png", False),
    ("a\\b.png", False),
])
def test_is_storage_reference(value, expected):
    assert is_storage_reference(value) is expected
