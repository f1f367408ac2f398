import pytest
from unittest.mock import MagicMock

from blog_portal.core.exception import ApiError
from blog_portal.models import Article
from blog_portal.ui.viewmodels.article_detail_viewmodel import (ARTICLE_LOAD_ERROR, ARTICLE_NOT_FOUND,
                                                                 ArticleDetailViewModel)


@pytest.fixture
def mock_article_service():
    return MagicMock()


@pytest.fixture
def viewmodel(qtbot, mock_article_service):
    vm = ArticleDetailViewModel(article_service=mock_article_service)
    yield vm
    vm.dispose()


def test_load_found_article(viewmodel, mock_article_service, qtbot):
    article = Article(id="5", title="Deep dive", content="<p>" + "word " * 450 + "</p>",
                      category="Tech", date="2024-01-05T10:30:00Z")
    related = [Article(id="6", title="Other", content="x" * 120, category="Tech")]
    mock_article_service.get_article_with_related.return_value = (article, related)

    with qtbot.waitSignal(viewmodel.related_loaded, timeout=3000) as blocker:
        viewmodel.load("5")
    assert blocker.args == [related]
    assert viewmodel.article is article
    assert viewmodel.reading_time == 3
    assert viewmodel.formatted_date == "January 5, 2024"
    assert ArticleDetailViewModel.related_excerpt(related[0]) == "x" * 100 + "..."
    mock_article_service.get_article_with_related.assert_called_once()
    assert mock_article_service.get_article_with_related.call_args[0][0] == "5"


def test_load_missing_article(viewmodel, mock_article_service, qtbot):
    mock_article_service.get_article_with_related.return_value = (None, [])
    with qtbot.waitSignal(viewmodel.not_found, timeout=3000) as blocker:
        viewmodel.load("404")
    assert blocker.args == [ARTICLE_NOT_FOUND]
    assert viewmodel.is_not_found
    assert viewmodel.article is None


def test_load_failure(viewmodel, mock_article_service, qtbot):
    mock_article_service.get_article_with_related.side_effect = ApiError("down", status_code=502)
    with qtbot.waitSignal(viewmodel.error_occurred, timeout=3000) as blocker:
        viewmodel.load("1")
    assert blocker.args == [ARTICLE_LOAD_ERROR]
