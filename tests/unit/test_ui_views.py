from pydantic import ValidationError as PydanticValidationError
import pytest

from schemas.posts import PostCreate, PostReplace
from ui.views import _field_errors


@pytest.mark.unit
def test_field_errors_keyed_by_field():
    with pytest.raises(PydanticValidationError) as exc_info:
        PostReplace(title="x" * 300, content="c", published=False)

    errors = _field_errors(exc_info.value)

    assert list(errors) == ["title"]
    assert "255" in errors["title"]


@pytest.mark.unit
def test_field_errors_keeps_first_message_per_field():
    with pytest.raises(PydanticValidationError) as exc_info:
        PostCreate.model_validate({"title": "x" * 300})

    assert set(_field_errors(exc_info.value)) == {"title", "content"}
