### Insight service turns projection numbers into a short text insight via Ollama.
import json
import logging

import requests

import config


class InsightUnavailable(RuntimeError):
    pass


def build_prompt(summary: dict) -> str:
    balances = summary["projected_balances"]
    alert_lines = [
        f"- {a['type']}: {a['message']} ({a['date']})" for a in summary["alerts"]
    ] or ["- none"]

    lines = [
        "Return ONLY valid JSON in this exact format:",
        '{ "title": "...", "message": "...", "tone": "positive" | "alert" | "neutral", "tips": ["..."] }',
        "",
        f"Current balance: {summary['current_balance']:.2f}",
        f"Lowest projected balance (30 days): {balances['min']:.2f}",
        f"Highest projected balance (30 days): {balances['max']:.2f}",
        f"Balance at end of period: {balances['final']:.2f}",
        f"Active recurring rules: {summary['recurring_count']}",
        "Alerts:",
        *alert_lines,
    ]
    if summary["days_until_negative"] is not None:
        lines.append(f"Days until negative balance: {summary['days_until_negative']}")
    return "\n".join(lines)


def build_simulation_prompt(impact: dict) -> str:
    if impact["type"] == "one-time":
        kind = "One-time expense"
    else:
        kind = f"Recurring expense ({impact['frequency']})"
    change = impact["projected_balance_after"] - impact["current_balance"]

    lines = [
        "Return ONLY valid JSON in this exact format:",
        '{ "feasibility": "yes" | "no" | "partial", "message": "...", "impact": "...", '
        '"tips": ["..."], "alternatives": ["..."] }',
        "",
        f"Simulation: {kind}",
        f"Description: {impact['description']}",
        f"Amount: {impact['amount']:.2f}",
        f"Date: {impact['date']}",
        "",
        f"Current balance: {impact['current_balance']:.2f}",
        f"Balance at end of period without it: {impact['projected_balance_without']:.2f}",
        f"Balance at end of period with it: {impact['projected_balance_after']:.2f}",
        f"Change from current balance: {change:+.2f}",
        f"Will go negative: {'yes' if impact['will_go_negative'] else 'no'}",
    ]
    if impact["days_until_negative"] is not None:
        lines.append(f"Days until negative balance: {impact['days_until_negative']}")
    return "\n".join(lines)


def _ask_ollama(prompt: str) -> dict:
    """Post ``prompt`` to the configured Ollama model and parse its JSON answer.

    Raises InsightUnavailable when the model is not configured, unreachable,
    or answers with something other than a JSON object.
    """
    if not config.OLLAMA_BASE_URL:
        raise InsightUnavailable("OLLAMA_BASE_URL is not configured")

    try:
        resp = requests.post(
            f"{config.OLLAMA_BASE_URL}/api/generate",
            json={
                "model": config.OLLAMA_MODEL,
                "prompt": prompt,
                "stream": False,
                "options": {
                    "num_predict": 500
                }
            },
            timeout=60
        )
    except requests.RequestException as e:
        raise InsightUnavailable(f"Ollama request failed: {e}") from e

    if resp.status_code != 200:
        raise InsightUnavailable(f"Ollama request failed: {resp.text}")

    raw = resp.json().get("response")
    try:
        insight = json.loads(raw)
    except (TypeError, ValueError) as e:
        logging.warning(f"Unparsable insight response: {raw!r}")
        raise InsightUnavailable("Failed to parse LLM response") from e

    if not isinstance(insight, dict):
        raise InsightUnavailable("Failed to parse LLM response")
    return insight


def request_future_insight(summary: dict) -> dict:
    """Insight on the 30-day projection summary."""
    return _ask_ollama(build_prompt(summary))


def request_simulation_insight(impact: dict) -> dict:
    """Feasibility verdict and tips for a what-if expense."""
    return _ask_ollama(build_simulation_prompt(impact))
