import threading

import pytest
from unittest.mock import MagicMock

from blog_portal.core.exception import ApiError
from blog_portal.core.list_controller import ListController
from blog_portal.ui.viewmodels.list_viewmodel import (ARTICLES_LOAD_ERROR, CATEGORIES_LOAD_ERROR,
                                                       ListViewModel, article_list_viewmodel,
                                                       category_list_viewmodel)


# ---- Fixtures ----
@pytest.fixture
def controller():
    return ListController(text_fields=("title", "content", "author"), page_size=10,
                          category_key="category")


@pytest.fixture
def viewmodel(qtbot, controller):
    vm = ListViewModel(controller)
    yield vm
    vm.dispose()


# ---- 测试用例 ----
def test_rapid_typing_applies_only_last_term(viewmodel, qtbot, make_articles):
    """
    400ms 内连续输入 "a", "ab", "abc"，只应生效一次，且为 "abc"。
    """
    viewmodel.set_items(make_articles(5))
    applied = []
    viewmodel.search_applied.connect(applied.append)

    with qtbot.waitSignal(viewmodel.search_applied, timeout=2000) as blocker:
        viewmodel.set_search_text("a")
        viewmodel.set_search_text("ab")
        viewmodel.set_search_text("abc")
        assert viewmodel.is_search_pending
        assert viewmodel.search_term == ""
    assert blocker.args == ["abc"]

    qtbot.wait(500)
    assert applied == ["abc"]
    assert viewmodel.search_term == "abc"
    assert viewmodel.filtered_count == 0


def test_flush_search_applies_immediately(viewmodel, make_articles):
    viewmodel.set_items(make_articles(12))
    viewmodel.set_page(2)
    viewmodel.set_search_text("Article 1")
    viewmodel.flush_search()
    assert not viewmodel.is_search_pending
    assert viewmodel.search_term == "Article 1"
    assert viewmodel.current_page == 1
    assert viewmodel.filtered_count == 4  # 1, 10, 11, 12


def test_whitespace_search_term_is_applied_verbatim(viewmodel, make_articles):
    viewmodel.set_items(make_articles(3))
    viewmodel.set_search_text(" ")
    viewmodel.flush_search()
    assert viewmodel.search_term == " "
    assert viewmodel.filtered_count == 3  # "Article 1" 等标题都包含空格


def test_flush_with_unchanged_term_keeps_page(viewmodel, qtbot, make_articles):
    viewmodel.set_items(make_articles(25))
    viewmodel.set_search_text("Article")
    viewmodel.flush_search()
    viewmodel.set_page(2)
    with qtbot.assertNotEmitted(viewmodel.search_applied):
        viewmodel.flush_search()
    assert viewmodel.current_page == 2


def test_category_and_paging_apply_immediately(viewmodel, qtbot, make_articles):
    viewmodel.set_items(make_articles(25))
    with qtbot.waitSignal(viewmodel.list_changed, timeout=1000):
        viewmodel.set_page(9)
    assert viewmodel.current_page == 3
    viewmodel.set_category("Life")
    assert viewmodel.current_page == 1
    assert viewmodel.filtered_count == 12
    viewmodel.next_page()
    assert viewmodel.current_page == 2
    viewmodel.previous_page()
    assert viewmodel.current_page == 1


def test_set_items_emits_facets(viewmodel, qtbot, make_articles):
    with qtbot.waitSignal(viewmodel.facets_changed, timeout=1000) as blocker:
        viewmodel.set_items(make_articles(3))
    assert [(f.name, f.count) for f in blocker.args[0]] == [("Tech", 2), ("Life", 1)]


def test_load_success(qtbot, controller, make_articles):
    loader = MagicMock(return_value=make_articles(15))
    vm = ListViewModel(controller, loader=loader)
    with qtbot.waitSignal(vm.items_loaded, timeout=3000) as blocker:
        vm.load()
    assert blocker.args == [15]
    assert vm.loaded
    assert vm.total_pages == 2
    assert len(vm.visible) == 10
    loader.assert_called_once()


def test_load_failure_sets_banner(qtbot, controller):
    loader = MagicMock(side_effect=ApiError("boom", status_code=500))
    vm = ListViewModel(controller, loader=loader)
    with qtbot.waitSignal(vm.error_occurred, timeout=3000) as blocker:
        vm.load()
    assert blocker.args == [ARTICLES_LOAD_ERROR]
    assert vm.error_message == ARTICLES_LOAD_ERROR
    vm.clear_error()
    assert vm.error_message == ""


def test_result_discarded_after_dispose(qtbot, controller, make_articles):
    """页面被替换后返回的结果不应再应用"""
    release = threading.Event()

    def slow_loader(flag):
        release.wait(2)
        return make_articles(3)

    vm = ListViewModel(controller, loader=slow_loader)
    vm.load()
    assert vm.is_busy
    vm.dispose()
    release.set()
    qtbot.waitUntil(lambda: not vm.is_busy, timeout=3000)
    assert not vm.loaded
    assert vm.total_count == 0


def test_load_after_dispose_is_ignored(controller):
    loader = MagicMock()
    vm = ListViewModel(controller, loader=loader)
    vm.dispose()
    vm.load()
    assert not vm.is_busy
    loader.assert_not_called()


def test_remove_item_locally(viewmodel, qtbot, make_articles):
    viewmodel.set_items(make_articles(11))
    with qtbot.waitSignal(viewmodel.list_changed, timeout=1000):
        assert viewmodel.remove_item("3")
    assert viewmodel.total_count == 10
    assert viewmodel.total_pages == 1
    assert not viewmodel.remove_item("3")


def test_factories_configure_page_size(qtbot, make_categories):
    article_service = MagicMock()
    public_vm = article_list_viewmodel(article_service, page_size=9)
    assert public_vm.controller.page_size == 9

    category_service = MagicMock()
    category_service.get_categories.side_effect = ApiError("down")
    categories_vm = category_list_viewmodel(category_service, page_size=10)
    categories_vm.set_items(make_categories("Tech", "Travel"))
    categories_vm.set_category("Tech")
    assert categories_vm.filtered_count == 2
    with qtbot.waitSignal(categories_vm.error_occurred, timeout=3000) as blocker:
        categories_vm.load()
    assert blocker.args == [CATEGORIES_LOAD_ERROR]
