import re

from widget_site.models import default_site
from widget_site.render import build_site, render_index, render_script


def test_index_has_one_scope_per_select():
    html = render_index()
    assert html.count('<div class="select ') == 2
    assert 'class="select select1"' in html
    assert 'class="select select2"' in html
    # Lists start hidden; nothing else on the page is a <ul>.
    assert html.count("<ul") == 2
    assert html.count('<ul style="display: none">') == 2
    assert html.count('<li data-value="Option 2">Option 2</li>') == 2


def test_rows_keep_control_order():
    html = render_index()
    rows = re.findall(r'<tr class="row" data-name="([^"]+)"', html)
    assert rows == ["Alvin", "Alan", "Jonathan", "Margaret"]
    for marker in ('class="num"', 'class="add"', 'class="reset"', 'class="sum"'):
        assert html.count(marker) == 4


def test_rows_carry_their_numbers():
    html = render_index()
    assert 'data-name="Alan" data-value="5" data-sum="12.52" data-step="2.52"' in html
    assert '<td class="sum">22</td>' in html
    assert 'value="10"' in html


def test_render_reflects_model_state():
    site = default_site()
    site.dropdown("select2").toggle()
    site.dropdown("select2").select_option("Option 3")
    site.dropdown("select1").toggle()
    html = render_index(site)
    assert 'data-selected="Option 3"' in html
    assert html.count('<ul style="display: none">') == 1


def test_text_is_escaped():
    site = default_site()
    site.dropdowns[0].options.append("<b>&</b>")
    html = render_index(site)
    assert "&lt;b&gt;&amp;&lt;/b&gt;" in html
    assert "<b>&</b>" not in html


def test_build_site(tmp_path):
    out = build_site(tmp_path / "site")
    assert (out / "index.html").read_text(encoding="utf-8") == render_index()
    assert (out / "widgets.js").read_text(encoding="utf-8") == render_script()
    assert '<script src="widgets.js"></script>' in render_index()
