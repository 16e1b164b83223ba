import pytest
from flask import Flask

from dashboard.utils.numeric import from_minor_units
from dashboard.utils.pagination import PageRequest, link_args, page_count, page_request


def test_from_minor_units_prefills_two_places():
    assert str(from_minor_units(1050)) == "10.50"
    assert str(from_minor_units(1)) == "0.01"


def test_page_request_reads_query_string():
    app = Flask(__name__)
    with app.test_request_context("/?page=3&per_page=24&query=paid"):
        assert page_request() == PageRequest(page=3, per_page=24)
        assert link_args(24) == {"query": "paid", "per_page": "24"}

    with app.test_request_context("/?page=-1&per_page=7"):
        assert page_request() == PageRequest(page=1, per_page=6)
        assert page_request(default_size=12).per_page == 12


@pytest.mark.parametrize("total, pages", [(0, 1), (1, 1), (6, 1), (7, 2), (48, 8)])
def test_page_count(total, pages):
    assert page_count(total, 6) == pages
