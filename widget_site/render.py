from html import escape
from pathlib import Path

from widget_site.models import HEADER_LABELS, RESET_LABEL, Site, default_site, format_number

WIDGETS_JS = r'''
(() => {
  "use strict";

  const round2 = (n) => Math.round(n * 100) / 100;
  const fmt = (n) => String(round2(n) || 0);

  // One state object per select; clicks never reach another instance.
  function initSelect(root) {
    const list = root.querySelector("ul");
    const label = root.querySelector(".label");
    const state = {
      open: list.style.display !== "none",
      selected: root.dataset.selected === undefined ? null : root.dataset.selected,
    };

    const render = () => {
      list.style.display = state.open ? "" : "none";
      root.classList.toggle("open", state.open);
      label.textContent = state.selected === null ? root.dataset.placeholder : state.selected;
    };

    root.addEventListener("click", (ev) => {
      const item = ev.target.closest("li");
      if (item && root.contains(item)) {
        if (!state.open) return;
        state.selected = item.dataset.value;
        state.open = false;
      } else {
        state.open = !state.open;
      }
      render();
    });

    render();
    return state;
  }

  function initRow(tr) {
    const input = tr.querySelector("input.num");
    const sumCell = tr.querySelector("td.sum");
    const step = Number(tr.dataset.step);
    const baseline = Number(tr.dataset.value);
    const state = { value: baseline, sum: Number(tr.dataset.sum) };

    const render = () => {
      input.value = String(state.value);
      sumCell.textContent = fmt(state.sum);
    };
    const applyDelta = (delta) => {
      state.sum = round2(state.sum + delta);
      render();
    };
    const commit = () => {
      const raw = input.value.trim();
      const n = Number(raw);
      if (raw === "" || !Number.isFinite(n)) {
        render();
        return;
      }
      const delta = n - state.value;
      state.value = n;
      applyDelta(delta);
    };

    input.addEventListener("keydown", (ev) => {
      if (ev.key === "Enter") commit();
    });
    // Enter also fires change in some browsers; the second commit has a zero delta.
    input.addEventListener("change", commit);
    tr.querySelector("button.add").addEventListener("click", () => applyDelta(step));
    tr.querySelector("button.reset").addEventListener("click", () => {
      state.value = baseline;
      state.sum = 0;
      render();
    });

    render();
    return state;
  }

  document.addEventListener("DOMContentLoaded", () => {
    const selects = {};
    document.querySelectorAll("div.select").forEach((el) => {
      selects[el.dataset.id] = initSelect(el);
    });
    const rows = {};
    document.querySelectorAll("tr.row").forEach((tr) => {
      rows[tr.dataset.name] = initRow(tr);
    });
    window.widgetSite = { selects, rows, ready: true };
  });
})();
'''

STYLE = """
body { font-family: sans-serif; margin: 2em; }
.selects { display: flex; gap: 4em; margin-bottom: 12em; }
div.select { position: relative; display: inline-block; min-width: 10em;
  border: 1px solid #999; padding: 0.4em 0.8em; cursor: pointer; user-select: none; }
div.select ul { position: absolute; top: 100%; left: -1px; right: -1px; z-index: 10;
  margin: 0; padding: 0; list-style: none; background: #fff; border: 1px solid #999; }
div.select li { padding: 0.3em 0.8em; }
div.select li:hover { background: #eef; }
table { border-collapse: collapse; }
td, th { border: 1px solid #ccc; padding: 0.3em 0.6em; }
input.num { width: 6em; }
"""


def render_script() -> str:
    return WIDGETS_JS


def _render_dropdown(dropdown) -> str:
    hidden = "" if dropdown.open else ' style="display: none"'
    selected = "" if dropdown.selected is None else f' data-selected="{escape(dropdown.selected)}"'
    items = "\n".join(
        f'      <li data-value="{escape(option)}">{escape(option)}</li>'
        for option in dropdown.options
    )
    return (
        f'  <div class="select {escape(dropdown.id)}" data-id="{escape(dropdown.id)}"'
        f' data-placeholder="{escape(dropdown.placeholder)}"{selected}>\n'
        f'    <span class="label">{escape(dropdown.label)}</span>\n'
        f'    <ul{hidden}>\n{items}\n    </ul>\n'
        f'  </div>'
    )


def _render_row(row) -> str:
    return (
        f'    <tr class="row" data-name="{escape(row.name)}" data-value="{row.baseline!r}"'
        f' data-sum="{row.sum!r}" data-step="{row.step!r}">\n'
        f'      <td class="name">{escape(row.name)}</td>\n'
        f'      <td><input class="num" type="number" step="any" value="{format_number(row.value)}"></td>\n'
        f'      <td><button class="add" type="button">+{format_number(row.step)}</button></td>\n'
        f'      <td><button class="reset" type="button">{RESET_LABEL}</button></td>\n'
        f'      <td class="sum">{row.display_sum}</td>\n'
        f'    </tr>'
    )


def render_index(site: Site = None) -> str:
    site = site or default_site()
    dropdowns = "\n".join(_render_dropdown(d) for d in site.dropdowns)
    rows = "\n".join(_render_row(r) for r in site.table)
    name, value, total = HEADER_LABELS
    return f"""<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<title>{escape(site.title)}</title>
<style>{STYLE}</style>
<script src="widgets.js"></script>
</head>
<body>
<div class="selects">
{dropdowns}
</div>
<table class="aggregation">
  <thead>
    <tr><th>{name}</th><th>{value}</th><th></th><th></th><th>{total}</th></tr>
  </thead>
  <tbody>
{rows}
  </tbody>
</table>
</body>
</html>
"""


def build_site(out_dir, site: Site = None) -> Path:
    out = Path(out_dir)
    out.mkdir(parents=True, exist_ok=True)
    (out / "index.html").write_text(render_index(site), encoding="utf-8")
    (out / "widgets.js").write_text(render_script(), encoding="utf-8")
    return out
