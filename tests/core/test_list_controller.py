import pytest

from blog_portal.core.list_controller import ALL_CATEGORIES, ListController
from blog_portal.models import Facet


@pytest.fixture
def controller():
    return ListController(text_fields=("title", "content", "author"), page_size=10,
                          category_key="category")


def test_pagination_25_items(controller, make_articles):
    controller.set_items(make_articles(25))
    assert controller.total_pages == 3
    assert [a.id for a in controller.visible] == [str(i) for i in range(1, 11)]
    assert controller.set_page(5) == 3
    assert [a.id for a in controller.visible] == [str(i) for i in range(21, 26)]
    assert controller.has_previous and not controller.has_next


def test_page_clamped_low_and_invalid(controller, make_articles):
    controller.set_items(make_articles(5))
    assert controller.set_page(0) == 1
    assert controller.set_page(-3) == 1
    assert controller.set_page("x") == 1


def test_empty_collection(controller):
    controller.set_items([])
    assert controller.total_pages == 0
    assert controller.visible == []
    assert controller.set_page(4) == 1
    assert controller.page_numbers() == []


def test_search_is_case_insensitive_substring(controller, make_articles):
    controller.set_items(make_articles(25))
    controller.set_search_term("ARTICLE 2")
    # "Article 2" 与 "Article 20".."Article 25"
    assert sorted(a.id for a in controller.filtered) == ["2", "20", "21", "22", "23", "24", "25"]


def test_search_matches_author(controller, make_articles):
    controller.set_items(make_articles(6))
    controller.set_search_term("author0")
    assert [a.id for a in controller.filtered] == ["3", "6"]


def test_filter_is_intersection_of_search_and_category(controller, make_articles):
    controller.set_items(make_articles(25))
    controller.set_search_term("article 1")
    controller.set_category("tech")
    # 奇数 id 属于 Tech
    assert sorted(a.id for a in controller.filtered) == ["1", "11", "13", "15", "17", "19"]
    controller.set_category(ALL_CATEGORIES)
    assert controller.filtered_count == 11


def test_inputs_reset_page(controller, make_articles):
    controller.set_items(make_articles(25))
    controller.set_page(3)
    controller.set_search_term("")
    assert controller.current_page == 1
    controller.set_page(2)
    controller.set_category("Life")
    assert controller.current_page == 1
    controller.set_page(2)
    controller.set_items(make_articles(30))
    assert controller.current_page == 1


def test_facets_first_appearance_order(controller, make_articles):
    articles = make_articles(5, categories=("Life", "Tech", "Life"))
    controller.set_items(articles)
    assert controller.facets == [Facet("Life", 3), Facet("Tech", 2)]
    controller.set_category("Tech")
    assert controller.facets == [Facet("Life", 3), Facet("Tech", 2)]


def test_remove_item(controller, make_articles):
    controller.set_items(make_articles(11))
    assert controller.remove("11")
    assert controller.total_pages == 1
    assert not controller.remove("missing")


def test_controller_without_category_key(make_categories):
    controller = ListController(text_fields=("name", "description"), page_size=10)
    controller.set_items(make_categories("Tech", "Travel", "Food"))
    controller.set_category("Tech")
    assert controller.filtered_count == 3
    assert controller.facets == []
    controller.set_search_term("tr")
    assert [c.name for c in controller.filtered] == ["Travel"]


def test_callable_fields():
    items = [{"id": 1, "t": "Alpha"}, {"id": 2, "t": "Beta"}]
    controller = ListController(text_fields=(lambda d: d["t"],), page_size=1, id_key=lambda d: d["id"])
    controller.set_items(items)
    controller.set_search_term("bet")
    assert controller.visible == [{"id": 2, "t": "Beta"}]
    assert controller.remove(1)


def test_invalid_page_size():
    with pytest.raises(ValueError):
        ListController(text_fields=("title",), page_size=0)
