# file: tests/test_detect.py
from __future__ import annotations

import time

from jobscan.core.detect import baseline_for_label, detect
from jobscan.core.normalize import normalize_text
from jobscan.core.rules import RULE_LABELS, RULES


def _ids(text: str) -> list[str]:
    return [s.rule_id for s in detect(normalize_text(text))]


def test_detect_scam_phrase_fires_expected_rules() -> None:
    ids = _ids("Pay via gift card and contact us on WhatsApp, training fee required")
    assert "gift_card" in ids
    assert "whatsapp" in ids
    assert "training_fee" in ids


def test_detect_rule_fires_once_regardless_of_repetition() -> None:
    signals = detect(normalize_text("gift card " * 25))
    assert [s.rule_id for s in signals] == ["gift_card"]
    assert signals[0].weight == 35


def test_detect_empty_text_has_no_signals() -> None:
    assert detect("") == []


def test_detect_benign_posting_has_no_signals() -> None:
    text = (
        "Software Engineer position at Acme Corp, competitive salary, "
        "apply via our careers portal"
    )
    assert _ids(text) == []


def test_detect_phone_number() -> None:
    assert "phone_number" in _ids("Call our recruiter at +1 650-253-0000 to continue")
    assert "phone_number" not in _ids("We pay $500 per week in 2026")


def test_detect_free_email_with_company_name() -> None:
    assert "freemail_company" in _ids("Reply to acme.hiring@gmail.com - Acme Holdings Inc")
    assert "freemail_company" not in _ids("Reply to hiring@acme.com - Acme Holdings Inc")
    assert "freemail_company" not in _ids("Reply to acme.hiring@gmail.com")


def test_detect_format_and_workload_rules() -> None:
    assert "link_shortener" in _ids("Apply here: bit.ly/3xYz")
    assert "excessive_punctuation" in _ids("Hiring now!!! Apply fast")
    assert "daily_pay" in _ids("Earn $300 per day from your phone")
    assert "no_interview" in _ids("No interview, you are hired")
    assert "immediate_start" in _ids("Urgent hiring, start immediately")
    assert "too_easy" in _ids("No experience needed, simple typing job")


def test_detect_platform_rules() -> None:
    assert "chat_interview" in _ids("The interview will be held on Telegram with our manager")
    assert "verification_code" in _ids("Send us the verification code you receive")


def test_detect_payment_rules() -> None:
    assert "crypto" in _ids("Salary paid in USDT to your wallet address")
    assert "wire_transfer" in _ids("Send a wire transfer for the starter kit")
    assert "p2p_payment" in _ids("We reimburse via Zelle")
    assert "equipment_check" in _ids("We will send you a check to buy a laptop from our vendor")
    assert "sensitive_data" in _ids("Send a photo of the front of your ID and your SSN")
    assert "upfront_fee" in _ids("A $50 application fee is required")


def test_detect_payroll_wording_is_not_a_payment_signal() -> None:
    ids = _ids("Accountant role at Acme. We pay biweekly by direct deposit or check.")
    assert ids == []
    assert _ids("Payroll runs monthly; we will send your salary by direct deposit") == []


def test_detect_applicant_payments_still_fire() -> None:
    assert "upfront_fee" in _ids("You must send a $100 deposit before your first shift")
    assert "upfront_fee" in _ids("You will pay a small fee for the background screening")
    assert "equipment_check" in _ids("Deposit the check we mail you and keep the rest")


def test_detect_signal_processing_is_not_a_chat_app() -> None:
    ids = _ids("Interview with our signal processing team in Boston")
    assert "chat_interview" not in ids
    assert "signal_app" not in ids
    assert "chat_interview" in _ids("The interview happens over Signal")


def test_detect_large_input_runs_in_linear_time() -> None:
    text = "lorem ipsum inc " * 6250
    start = time.perf_counter()
    ids = _ids(text)
    elapsed = time.perf_counter() - start
    assert "freemail_company" not in ids
    assert elapsed < 1.0


def test_rule_ids_and_labels_are_unique() -> None:
    ids = [r.id for r in RULES]
    labels = [r.label for r in RULES]
    assert len(ids) == len(set(ids))
    assert len(labels) == len(set(labels))
    assert RULE_LABELS == frozenset(labels)


def test_rule_weight_bands_preserve_severity_order() -> None:
    def weights(category: str) -> list[int]:
        return [r.weight for r in RULES if r.category == category]

    assert min(weights("payment")) > max(weights("contact"))
    assert min(weights("contact")) >= max(weights("platform"))
    assert min(weights("platform")) > max(weights("workload"))
    assert min(weights("workload")) > max(weights("format"))


def test_baseline_for_label() -> None:
    assert baseline_for_label(None) == 0
    assert baseline_for_label("low") == 10
    assert baseline_for_label("Medium") == 35
    assert baseline_for_label(" HIGH ") == 60
    assert baseline_for_label("critical") == 10
