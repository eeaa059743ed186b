"""
Peptide Calculator Web Application

Local single-user front end for the dosing calculator:
- calculator page
- JSON API for calculations, presets, saved configurations and last state
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from flask import Flask, jsonify, request, render_template_string
from werkzeug.exceptions import BadRequest

from config import Config
from database import CalculatorStore
from models import create_database, get_session
from presets import SYRINGE_SPECS, get_all_peptides
from state import (
    config_from_state,
    default_config_name,
    recompute,
    recompute_and_persist,
    state_from_dict,
    state_from_request,
)


PAGE_TEMPLATE = """<!doctype html>
<html lang="en">
<head>
  <meta charset="utf-8">
  <meta name="viewport" content="width=device-width, initial-scale=1">
  <title>Peptide Dilution Calculator</title>
  <style>
    body { font-family: system-ui, sans-serif; max-width: 720px; margin: 2rem auto; padding: 0 1rem; color: #111827; }
    label { display: block; margin-top: .75rem; font-weight: 600; }
    input, select { padding: .4rem; width: 100%; box-sizing: border-box; }
    .row { display: flex; gap: 1rem; }
    .row > div { flex: 1; }
    .card { border: 1px solid #E5E7EB; border-radius: 8px; padding: 1rem; margin-top: 1rem; }
    .error { color: #DC2626; }
    .warning { color: #B45309; }
  </style>
</head>
<body>
  <h1>Peptide Dilution Calculator</h1>

  <form id="calc">
    <label for="selectedPeptideId">Peptide</label>
    <select id="selectedPeptideId" name="selectedPeptideId">
      {% for p in peptides %}
      <option value="{{ p.id }}" {% if p.id == state.selected_peptide_id %}selected{% endif %}>{{ p.name }}</option>
      {% endfor %}
      <option value="custom" {% if state.selected_peptide_id == 'custom' %}selected{% endif %}>Custom Peptide</option>
    </select>

    <div id="customNameRow"{% if state.selected_peptide_id != 'custom' %} hidden{% endif %}>
      <label for="customPeptideName">Peptide name</label>
      <input id="customPeptideName" name="customPeptideName" type="text" value="{{ state.custom_peptide_name }}">
    </div>

    <div class="row">
      <div>
        <label for="mgInVial">Peptide in vial (mg)</label>
        <input id="mgInVial" name="mgInVial" type="number" step="any" value="{{ state.mg_in_vial if state.mg_in_vial is not none else '' }}">
      </div>
      <div>
        <label for="waterMl">Bacteriostatic water (mL)</label>
        <input id="waterMl" name="waterMl" type="number" step="any" value="{{ state.water_ml if state.water_ml is not none else '' }}">
      </div>
    </div>

    <div class="row">
      <div>
        <label for="desiredDose">Desired dose</label>
        <input id="desiredDose" name="desiredDose" type="number" step="any" value="{{ state.desired_dose if state.desired_dose is not none else '' }}">
      </div>
      <div>
        <label for="doseUnit">Unit</label>
        <select id="doseUnit" name="doseUnit">
          <option value="mg" {% if state.dose_unit == 'mg' %}selected{% endif %}>mg</option>
          <option value="mcg" {% if state.dose_unit == 'mcg' %}selected{% endif %}>mcg</option>
        </select>
      </div>
      <div>
        <label for="syringeSize">Syringe</label>
        <select id="syringeSize" name="syringeSize">
          {% for s in syringes %}
          <option value="{{ s.id }}" {% if s.id == state.syringe_size %}selected{% endif %}>{{ s.label }}</option>
          {% endfor %}
        </select>
      </div>
    </div>
  </form>

  <div class="card">
    <div id="syringe">{{ derived.syringeSvg | safe }}</div>
    <p id="label">{{ derived.syringeLabel | safe }}</p>
    <div id="details"></div>
    <ul id="messages">
      {% for e in derived.validation.errors %}<li class="error">{{ e }}</li>{% endfor %}
      {% for w in derived.validation.warnings %}<li class="warning">{{ w }}</li>{% endfor %}
    </ul>
  </div>

  <script>
    const form = document.getElementById("calc");
    async function recalc(){
      const data = Object.fromEntries(new FormData(form).entries());
      const r = await fetch("/api/calculate", {
        method: "POST",
        headers: {"Content-Type": "application/json"},
        body: JSON.stringify(data)
      });
      const j = await r.json();
      document.getElementById("syringe").innerHTML = j.syringeSvg;
      document.getElementById("label").innerHTML = j.syringeLabel;
      const c = j.concentration, d = j.dosesPerVial;
      document.getElementById("details").textContent = c
        ? `${c.mgPerMl} mg/mL (${c.mcgPerUnit} mcg per unit)` + (d ? ` · ${d.fullDoses} full doses` : "")
        : "";
      const ul = document.getElementById("messages");
      ul.innerHTML = "";
      for (const e of j.validation.errors){ const li = document.createElement("li"); li.className = "error"; li.textContent = e; ul.appendChild(li); }
      for (const w of j.validation.warnings){ const li = document.createElement("li"); li.className = "warning"; li.textContent = w; ul.appendChild(li); }
    }
    document.getElementById("selectedPeptideId").addEventListener("change", (e) => {
      document.getElementById("customNameRow").hidden = e.target.value !== "custom";
    });
    form.addEventListener("input", recalc);
    form.addEventListener("change", recalc);
  </script>
</body>
</html>"""


def create_app(database_url: Optional[str] = None) -> Flask:
    """Build the Flask app bound to a database (defaults to Config.DATABASE_URL)"""
    app = Flask(__name__)
    app.config["SECRET_KEY"] = Config.SECRET_KEY
    app.config["DATABASE_URL"] = database_url or Config.DATABASE_URL
    app.logger.setLevel(getattr(logging, Config.LOG_LEVEL, logging.INFO))

    engine = create_database(app.config["DATABASE_URL"])

    def open_store() -> CalculatorStore:
        return CalculatorStore(get_session(engine=engine))

    def json_body() -> Dict[str, Any]:
        # Malformed JSON raises BadRequest from get_json
        payload = request.get_json(force=True)
        if not isinstance(payload, dict):
            raise BadRequest("Expected a JSON object")
        return payload

    @app.errorhandler(BadRequest)
    def bad_request(e):
        return jsonify({"error": e.description or "Bad request"}), 400

    # ----------------------------
    # Pages
    # ----------------------------
    @app.route("/")
    def index():
        store = open_store()
        try:
            state = state_from_dict(store.get_last_state())
        finally:
            store.session.close()
        return render_template_string(
            PAGE_TEMPLATE,
            state=state,
            derived=recompute(state),
            peptides=get_all_peptides(),
            syringes=list(SYRINGE_SPECS.values()),
        )

    # ----------------------------
    # Calculator API
    # ----------------------------
    @app.route("/api/calculate", methods=["POST"])
    def api_calculate():
        """
        POST JSON calculator inputs (camelCase state fields).
        Returns derived values; the raw inputs become the last state.
        """
        state = state_from_request(json_body())
        store = open_store()
        try:
            derived, persisted = recompute_and_persist(state, store)
        finally:
            store.session.close()
        derived["state"] = persisted
        return jsonify(derived)

    @app.route("/api/presets", methods=["GET"])
    def api_presets():
        return jsonify({
            "peptides": [p.to_dict() for p in get_all_peptides()],
            "syringes": [s.to_dict() for s in SYRINGE_SPECS.values()],
        })

    # ----------------------------
    # Last state
    # ----------------------------
    @app.route("/api/state", methods=["GET"])
    def api_get_state():
        store = open_store()
        try:
            last_state = store.get_last_state()
        finally:
            store.session.close()
        return jsonify({"state": last_state})

    @app.route("/api/state", methods=["DELETE"])
    def api_clear_state():
        store = open_store()
        try:
            store.clear_state()
        finally:
            store.session.close()
        return jsonify({"state": None})

    # ----------------------------
    # Saved configurations
    # ----------------------------
    @app.route("/api/configs", methods=["GET"])
    def api_list_configs():
        store = open_store()
        try:
            configs = store.get_all_configs()
        finally:
            store.session.close()
        return jsonify({"configs": configs})

    @app.route("/api/configs", methods=["POST"])
    def api_save_config():
        """
        POST either a full configuration record or {name?, state{...}}.
        Without a name the default "<peptide> - <mg>mg/<water>mL" is used.
        """
        payload = json_body()
        if "state" in payload:
            state = state_from_request(payload.get("state") or {})
            name = (payload.get("name") or "").strip() or default_config_name(state)
            config = config_from_state(state, name)
            if payload.get("id"):
                config["id"] = payload["id"]
        else:
            config = dict(payload)
            if not (config.get("name") or "").strip():
                return jsonify({"error": "Configuration name is required"}), 400

        store = open_store()
        try:
            saved = store.save_config(config)
        finally:
            store.session.close()
        if saved is None:
            app.logger.error("Could not save configuration %r", config.get("name"))
            return jsonify({"error": "Could not save configuration"}), 500
        return jsonify(saved), 201

    @app.route("/api/configs/<config_id>", methods=["GET"])
    def api_get_config(config_id):
        store = open_store()
        try:
            config = store.get_config_by_id(config_id)
        finally:
            store.session.close()
        if config is None:
            return jsonify({"error": "Configuration not found"}), 404
        return jsonify(config)

    @app.route("/api/configs/<config_id>", methods=["DELETE"])
    def api_delete_config(config_id):
        store = open_store()
        try:
            deleted = store.delete_config(config_id)
        finally:
            store.session.close()
        if not deleted:
            return jsonify({"error": "Could not delete configuration"}), 500
        return jsonify({"deleted": config_id})

    return app


if __name__ == "__main__":
    logging.basicConfig(level=Config.LOG_LEVEL)
    app = create_app()
    app.run(debug=Config.DEBUG)
