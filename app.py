"""
Flask web application for the calculator hub.

Single-file app using render_template_string. Run via ``python main.py``
which starts the dev server on localhost:5000.
"""

from __future__ import annotations

import logging
from typing import Dict, List

from flask import Flask, abort, redirect, render_template_string, request, send_file, url_for

import catalog
import config as cfg
import report
from calculators import CALCULATORS, is_implemented
from cli import detail_lists, detail_rows, detail_tables, fmt_detail, fmt_value, label_for
from engine import FormSession, Overlay

logger = logging.getLogger(__name__)

app = Flask(__name__)
app.config["CATALOG_PATH"] = cfg.CATALOG_PATH

_catalog_cache: Dict[str, List[catalog.Category]] = {}


def get_catalog() -> List[catalog.Category]:
    """Parsed catalog for the configured path; empty if the file is missing."""
    path = app.config["CATALOG_PATH"]
    if path not in _catalog_cache:
        try:
            _catalog_cache[path] = catalog.load_catalog(path)
        except FileNotFoundError:
            logger.error("catalog file not found: %s; serving an empty catalog", path)
            _catalog_cache[path] = []
    return _catalog_cache[path]


# ═══════════════════════════════════════════════════════════════════
# HTML Templates
# ═══════════════════════════════════════════════════════════════════

HEAD = r"""
<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="UTF-8">
<meta name="viewport" content="width=device-width, initial-scale=1.0">
<title>{{ title }} | Calculator Hub</title>
<style>
  *{margin:0;padding:0;box-sizing:border-box}
  :root{
    --bg-deep:#050816;
    --bg-surface:rgba(15,23,42,0.55);
    --bg-input:rgba(8,11,22,0.85);
    --border-subtle:rgba(99,102,241,0.1);
    --border-hover:rgba(99,102,241,0.25);
    --text-primary:#f1f5f9;
    --text-secondary:#94a3b8;
    --indigo:#818cf8;
    --indigo-deep:#6366f1;
    --violet:#8b5cf6;
    --emerald:#34d399;
    --amber:#fbbf24;
    --red:#f87171;
    --radius-lg:16px;
    --radius-md:10px;
  }
  body{
    background:var(--bg-deep);color:var(--text-primary);
    font-family:'Inter',system-ui,-apple-system,sans-serif;line-height:1.6;
  }
  a{color:var(--indigo);text-decoration:none}
  a:hover{text-decoration:underline}
  .container{max-width:1140px;margin:0 auto;padding:2rem 1.5rem}
  .nav{display:flex;gap:1.2rem;margin-bottom:1.5rem;font-size:.9rem}
  .hero{text-align:center;padding:1rem 0 2rem}
  .hero h1{font-size:clamp(1.5rem,4vw,2.3rem);font-weight:800;letter-spacing:-.03em}
  .hero-sub{color:var(--text-secondary);margin-top:.5rem;font-size:.92rem}
  .card{
    background:var(--bg-surface);border:1px solid var(--border-subtle);
    border-radius:var(--radius-lg);padding:1.5rem;margin-bottom:1.2rem;
  }
  .card:hover{border-color:var(--border-hover)}
  .grid{display:grid;grid-template-columns:repeat(auto-fill,minmax(300px,1fr));gap:1.2rem}
  h2{font-size:1.1rem;font-weight:700;margin-bottom:.6rem}
  h3{font-size:.95rem;font-weight:600;margin:.8rem 0 .4rem;color:var(--text-secondary)}
  .muted{color:var(--text-secondary);font-size:.85rem}
  .pill{display:inline-block;font-size:.7rem;padding:.1rem .55rem;border-radius:100px;
        background:rgba(99,102,241,.1);color:var(--indigo);margin-left:.4rem}
  .pill.popular{background:rgba(251,191,36,.12);color:var(--amber)}
  ul.calc-list{list-style:none}
  ul.calc-list li{padding:.25rem 0;border-bottom:1px solid rgba(51,65,85,.25)}
  ul.calc-list li:last-child{border-bottom:none}
  .form-grid{display:grid;grid-template-columns:repeat(auto-fill,minmax(240px,1fr));gap:1rem 1.5rem}
  .form-group{display:flex;flex-direction:column}
  .form-group label{font-size:.78rem;color:var(--text-secondary);margin-bottom:.3rem;font-weight:500}
  .form-group input,.form-group select,.search input,.search select{
    background:var(--bg-input);border:1px solid rgba(71,85,105,.35);border-radius:var(--radius-md);
    color:var(--text-primary);padding:.55rem .8rem;font-size:.88rem;font-family:inherit;
  }
  .form-group.has-error input,.form-group.has-error select{border-color:var(--red)}
  .help{font-size:.72rem;color:var(--text-secondary);margin-top:.2rem}
  .search{display:flex;flex-wrap:wrap;gap:.6rem;margin-bottom:1.5rem;align-items:center}
  .btn{
    display:inline-flex;align-items:center;justify-content:center;padding:.65rem 1.6rem;
    border:none;border-radius:var(--radius-md);font-size:.92rem;font-weight:600;cursor:pointer;
    font-family:inherit;color:#fff;
  }
  .btn-primary{background:linear-gradient(135deg,var(--indigo-deep),var(--violet))}
  .btn-secondary{background:rgba(71,85,105,.5)}
  .actions{display:flex;gap:.8rem;margin-top:1.3rem}
  .error{background:rgba(248,113,113,.08);border:1px solid rgba(248,113,113,.3);color:#fca5a5;
         border-radius:var(--radius-md);padding:.7rem 1rem;margin-bottom:1rem;font-size:.88rem}
  .stat-row{display:flex;justify-content:space-between;padding:.4rem 0;border-bottom:1px solid rgba(51,65,85,.3)}
  .stat-row:last-child{border-bottom:none}
  .stat-label{color:var(--text-secondary);font-size:.86rem}
  .stat-value{font-weight:600;font-size:.86rem;font-variant-numeric:tabular-nums}
  .stat-value.neg{color:var(--red)}
  .total{font-size:2rem;font-weight:800;color:var(--emerald)}
  .tier{color:var(--amber);font-weight:700;margin-left:.8rem}
  .overlay{border-color:rgba(52,211,153,.35)}
  .overlay-head{display:flex;justify-content:space-between;align-items:flex-start}
  table{width:100%;border-collapse:collapse;font-size:.82rem;margin-bottom:.6rem}
  th{text-align:left;padding:.4rem .6rem;color:var(--text-secondary);font-weight:600;
     border-bottom:1px solid rgba(51,65,85,.4)}
  td{padding:.35rem .6rem;border-bottom:1px solid rgba(51,65,85,.15)}
  .chart{width:100%;border-radius:var(--radius-md);margin-top:.8rem}
  .modes{display:flex;flex-wrap:wrap;gap:.5rem;margin-bottom:1rem}
  .modes a{padding:.3rem .9rem;border-radius:100px;border:1px solid var(--border-hover);font-size:.82rem}
  .modes a.active{background:var(--indigo-deep);color:#fff;border-color:var(--indigo-deep)}
</style>
</head>
<body>
<div class="container">
<div class="nav">
  <a href="{{ url_for('index') }}">Categories</a>
  <a href="{{ url_for('all_calculators') }}">All calculators</a>
  <a href="{{ url_for('all_calculators', popular='1') }}">Popular</a>
</div>
"""

FOOT = r"""
</div>
</body>
</html>
"""

INDEX_TEMPLATE = HEAD + r"""
<div class="hero">
  <h1>Calculator Hub</h1>
  <div class="hero-sub">{{ total }} calculators in {{ categories|length }} categories</div>
</div>
<form class="search" method="get" action="{{ url_for('index') }}">
  <input type="text" name="q" value="{{ q }}" placeholder="Search categories">
  <select name="sort">
    {% for key in sort_keys %}
    <option value="{{ key }}" {{ 'selected' if key == sort }}>Sort by {{ key }}</option>
    {% endfor %}
  </select>
  <button class="btn btn-primary" type="submit">Search</button>
</form>
{% if not categories %}
<div class="card"><p class="muted">No categories match "{{ q }}".</p></div>
{% endif %}
<div class="grid">
{% for cat in categories %}
  <div class="card">
    <h2><a href="{{ url_for('category_page', slug=cat.slug) }}">{{ cat.name }}</a></h2>
    <p class="muted">{{ cat.description }}</p>
    <p class="muted">{{ cat.calculator_count }} calculators &middot; {{ cat.popular_count }} popular</p>
    {% for sub in cat.subcategories %}
    <h3><a href="{{ url_for('subcategory_page', category=cat.slug, subcategory=sub.slug) }}">{{ sub.name }}</a></h3>
    {% endfor %}
  </div>
{% endfor %}
</div>
""" + FOOT

LIST_TEMPLATE = HEAD + r"""
<div class="hero">
  <h1>{{ heading }}</h1>
  <div class="hero-sub">{{ subheading }}</div>
</div>
{% if show_filters %}
<form class="search" method="get" action="{{ url_for('all_calculators') }}">
  <input type="text" name="q" value="{{ q }}" placeholder="Search calculators">
  <select name="category">
    <option value="">All categories</option>
    {% for cat in all_categories %}
    <option value="{{ cat.slug }}" {{ 'selected' if cat.slug == category }}>{{ cat.name }}</option>
    {% endfor %}
  </select>
  <select name="difficulty">
    <option value="">Any difficulty</option>
    {% for d in ['basic', 'intermediate', 'advanced'] %}
    <option value="{{ d }}" {{ 'selected' if d == difficulty }}>{{ d|capitalize }}</option>
    {% endfor %}
  </select>
  <label class="muted"><input type="checkbox" name="popular" value="1" {{ 'checked' if popular }}> Popular only</label>
  <button class="btn btn-primary" type="submit">Filter</button>
</form>
{% endif %}
{% if not groups %}
<div class="card"><p class="muted">No calculators found.</p></div>
{% endif %}
{% for title, entries in groups %}
<div class="card">
  <h2>{{ title }} <span class="muted">({{ entries|length }})</span></h2>
  <ul class="calc-list">
  {% for e in entries %}
    <li>
      <a href="{{ url_for('calculator_page', slug=e.slug) }}">{{ e.name }}</a>
      <span class="pill">{{ e.difficulty }}</span>
      {% if e.popular %}<span class="pill popular">popular</span>{% endif %}
      {% if not implemented(e.slug) %}<span class="pill">coming soon</span>{% endif %}
      <div class="muted">{{ e.description }}</div>
    </li>
  {% endfor %}
  </ul>
</div>
{% endfor %}
""" + FOOT

CALCULATOR_TEMPLATE = HEAD + r"""
<div class="hero">
  <h1>{{ spec.name }}</h1>
  <div class="hero-sub">{{ spec.description }}</div>
</div>

{% if spec.modes|length > 1 %}
<div class="modes">
  {% for m in spec.modes %}
  <a class="{{ 'active' if m.key == session.mode }}" href="{{ url_for('calculator_page', slug=spec.slug, mode=m.key) }}">{{ m.label }}</a>
  {% endfor %}
</div>
{% endif %}

{% if session.overlay == overlay_open and result %}
<div class="card overlay">
  <div class="overlay-head">
    <div>
      <div class="muted">{{ result.total_label }}</div>
      <span class="total">{{ fmt_value(result.total, result.unit) }}</span>
      {% if result.tier %}<span class="tier">{{ result.tier.label }}</span>{% endif %}
    </div>
    <a class="btn btn-secondary" href="{{ url_for('calculator_page', slug=spec.slug, mode=session.mode) }}">Close</a>
  </div>
  <h3>Breakdown ({{ result.combine }})</h3>
  {% for c in result.components %}
  <div class="stat-row"><span class="stat-label">{{ c.label }}</span>
    <span class="stat-value {{ 'neg' if c.value < 0 }}">{{ fmt_value(c.value, c.unit) }}</span></div>
  {% endfor %}
  {% set rows = detail_rows(result) %}
  {% if rows %}
  <h3>Details</h3>
  {% for label, text in rows %}
  <div class="stat-row"><span class="stat-label">{{ label }}</span><span class="stat-value">{{ text }}</span></div>
  {% endfor %}
  {% endif %}
  {% for title, table in detail_tables(result) %}
  <h3>{{ title }}</h3>
  <table>
    <thead><tr>{% for k in table[0].keys() %}<th>{{ label_for(k) }}</th>{% endfor %}</tr></thead>
    <tbody>
    {% for entry in table %}
      <tr>{% for k, v in entry.items() %}<td>{{ fmt_detail(k, v) }}</td>{% endfor %}</tr>
    {% endfor %}
    </tbody>
  </table>
  {% endfor %}
  {% set notes = detail_lists(result) %}
  {% if notes %}
  <h3>Recommendations</h3>
  <ul class="muted">{% for n in notes %}<li>{{ n }}</li>{% endfor %}</ul>
  {% endif %}
  {% for img in charts %}
  <img class="chart" src="data:image/png;base64,{{ img }}" alt="chart">
  {% endfor %}
  <div class="actions">
    <a class="btn btn-secondary" href="{{ url_for('calculator_pdf', slug=spec.slug, **session.values) }}">Download PDF</a>
  </div>
</div>
{% endif %}

<div class="card">
  {% if session.error %}<div class="error">{{ session.error }}</div>{% endif %}
  <form method="post" action="{{ url_for('calculator_page', slug=spec.slug) }}">
    <input type="hidden" name="mode" value="{{ session.mode }}">
    <div class="form-grid">
    {% for f in spec.fields_for(session.mode) %}
      <div class="form-group {{ 'has-error' if session.error_field == f.name }}">
        <label for="{{ f.name }}">{{ f.label }}</label>
        {% if f.kind == 'choice' %}
        <select id="{{ f.name }}" name="{{ f.name }}">
          {% for value, text in f.choices %}
          <option value="{{ value }}" {{ 'selected' if session.values.get(f.name) == value }}>{{ text }}</option>
          {% endfor %}
        </select>
        {% elif f.kind == 'bool' %}
        <input type="checkbox" id="{{ f.name }}" name="{{ f.name }}" value="on" {{ 'checked' if session.values.get(f.name) }}>
        {% elif f.kind == 'date' %}
        <input type="date" id="{{ f.name }}" name="{{ f.name }}" value="{{ session.values.get(f.name, '') }}">
        {% else %}
        <input type="text" id="{{ f.name }}" name="{{ f.name }}" value="{{ session.values.get(f.name, '') }}">
        {% endif %}
        {% if f.help %}<span class="help">{{ f.help }}</span>{% endif %}
      </div>
    {% endfor %}
    </div>
    <div class="actions">
      <button class="btn btn-primary" type="submit" name="action" value="calculate">Calculate</button>
      <button class="btn btn-secondary" type="submit" name="action" value="reset">Reset</button>
    </div>
  </form>
</div>
""" + FOOT

PLACEHOLDER_TEMPLATE = HEAD + r"""
<div class="hero">
  <h1>{{ entry.name }}</h1>
  <div class="hero-sub">{{ entry.description }}</div>
</div>
<div class="card">
  <p class="muted">This calculator is listed in the catalog but has not been built yet.</p>
  <p><a href="{{ url_for('category_page', slug=entry.category) }}">Browse the rest of the category</a></p>
</div>
""" + FOOT


def _render_calculator(spec, session: FormSession, status: int = 200):
    charts = report.get_web_charts(session.result) if session.result is not None else []
    html = render_template_string(
        CALCULATOR_TEMPLATE,
        title=spec.name,
        spec=spec,
        session=session,
        result=session.result,
        charts=charts,
        fmt_value=fmt_value,
        fmt_detail=fmt_detail,
        label_for=label_for,
        detail_rows=detail_rows,
        detail_tables=detail_tables,
        detail_lists=detail_lists,
        overlay_open=Overlay.OPEN,
    )
    return html, status


def _render_list(heading, subheading, groups, status=200, **filters):
    return render_template_string(
        LIST_TEMPLATE,
        title=heading,
        heading=heading,
        subheading=subheading,
        groups=groups,
        implemented=is_implemented,
        all_categories=get_catalog(),
        **filters,
    ), status


# ═══════════════════════════════════════════════════════════════════
# Routes
# ═══════════════════════════════════════════════════════════════════

@app.route("/")
def index():
    q = request.args.get("q", "")
    sort = request.args.get("sort", "name")
    if sort not in catalog.SORT_KEYS:
        abort(400)
    cats = get_catalog()
    shown = catalog.sort_categories(catalog.search_categories(cats, q), sort)
    return render_template_string(
        INDEX_TEMPLATE,
        title="Categories",
        categories=shown,
        total=len(catalog.all_calculators(cats)),
        q=q,
        sort=sort,
        sort_keys=catalog.SORT_KEYS,
    )


@app.route("/all")
def all_calculators():
    q = request.args.get("q", "")
    category = request.args.get("category", "")
    difficulty = request.args.get("difficulty", "")
    popular = request.args.get("popular", "") in ("1", "on", "true")
    cats = get_catalog()
    entries = catalog.filter_calculators(cats, category=category, difficulty=difficulty,
                                         popular_only=popular, query=q)
    groups = [(cat.name, items) for cat, items in catalog.group_by_category(cats, entries)]
    return _render_list(
        "All Calculators", f"{len(entries)} calculators", groups,
        show_filters=True, q=q, category=category, difficulty=difficulty, popular=popular,
    )


@app.route("/category/<slug>")
def category_page(slug: str):
    cat = catalog.get_category(get_catalog(), slug)
    if cat is None:
        abort(404)
    groups = [(sub.name, list(sub.calculators)) for sub in cat.subcategories]
    return _render_list(cat.name, cat.description, groups, show_filters=False)


@app.route("/catalog.json")
def catalog_json():
    return app.response_class(catalog.catalog_to_json(get_catalog()), mimetype="application/json")


@app.route("/calculator/<slug>", methods=["GET", "POST"])
def calculator_page(slug: str):
    spec = CALCULATORS.get(slug)
    if spec is None:
        entry = catalog.get_calculator(get_catalog(), slug)
        if entry is None:
            abort(404)
        return render_template_string(PLACEHOLDER_TEMPLATE, title=entry.name, entry=entry)

    if request.method == "GET":
        session = FormSession(spec)
        mode = request.args.get("mode")
        if mode in [m.key for m in spec.modes]:
            session.values["mode"] = mode
        return _render_calculator(spec, session)

    form = request.form.to_dict()
    session = FormSession(spec)
    if form.get("action") == "reset":
        session.reset()
        if form.get("mode") in [m.key for m in spec.modes]:
            session.values["mode"] = form["mode"]
        return _render_calculator(spec, session)

    form.pop("action", None)
    if session.submit(form) is None:
        logger.info("%s: rejected input (%s): %s", slug, session.error_field, session.error)
        return _render_calculator(spec, session, 400)
    return _render_calculator(spec, session)


@app.route("/calculator/<slug>/report.pdf")
def calculator_pdf(slug: str):
    spec = CALCULATORS.get(slug)
    if spec is None:
        abort(404)
    session = FormSession(spec)
    result = session.submit(request.args.to_dict())
    if result is None:
        return session.error, 400
    path = report.generate_pdf(spec, result, cfg.REPORT_PATH)
    return send_file(path, as_attachment=True, download_name=f"{slug}.pdf")


@app.route("/<category>/<subcategory>")
def subcategory_page(category: str, subcategory: str):
    cats = get_catalog()
    sub = catalog.get_subcategory(cats, category, subcategory)
    if sub is None:
        abort(404)
    cat = catalog.get_category(cats, category)
    return _render_list(sub.name, f"{cat.name} - {sub.description}",
                        [(sub.name, list(sub.calculators))], show_filters=False)


@app.route("/popular")
def popular():
    return redirect(url_for("all_calculators", popular="1"))


# ═══════════════════════════════════════════════════════════════════
# Entry point
# ═══════════════════════════════════════════════════════════════════

def run_web(port: int = cfg.WEB_PORT, debug: bool = True) -> None:
    """Start the Flask development server and open browser."""
    import webbrowser
    import threading

    url = f"http://{cfg.WEB_HOST}:{port}"
    logger.info("starting web app at %s", url)
    print(f"Starting web app at {url}")
    threading.Timer(1.0, lambda: webbrowser.open(url)).start()
    app.run(host=cfg.WEB_HOST, port=port, debug=debug)


if __name__ == "__main__":
    run_web()
