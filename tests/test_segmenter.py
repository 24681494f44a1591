import pytest

from clause_review.segmenter import STRATEGIES, segment, segment_document, strip_header

NUMBERED = (
    "1. Pay rent on time.\n\n"
    "2. No pets allowed without consent.\n\n"
    "3. Security deposit is $500, refundable within 30 days."
)
NUMBERED_CLAUSES = [
    "Pay rent on time.",
    "No pets allowed without consent.",
    "Security deposit is $500, refundable within 30 days.",
]

PARA_1 = "The tenant shall keep the premises clean and in good repair at all times."
PARA_2 = "The landlord may inspect the property with twenty four hours written notice."


@pytest.mark.parametrize("strategy", STRATEGIES)
def test_empty_text_gives_no_clauses(strategy):
    assert segment("", strategy) == []
    assert segment(None, strategy) == []


@pytest.mark.parametrize("strategy", STRATEGIES)
def test_numbered_clauses_are_split_and_unnumbered(strategy):
    assert segment(NUMBERED, strategy) == NUMBERED_CLAUSES


def test_default_strategy_splits_numbered_clauses():
    assert segment(NUMBERED) == NUMBERED_CLAUSES


@pytest.mark.parametrize("strategy", STRATEGIES)
def test_windows_line_endings(strategy):
    assert segment(NUMBERED.replace("\n", "\r\n"), strategy) == NUMBERED_CLAUSES


@pytest.mark.parametrize("strategy", STRATEGIES)
def test_unstructured_paragraphs_fall_back_to_blank_lines(strategy):
    result = segment_document(f"{PARA_1}\n\n{PARA_2}", strategy)
    assert result.clauses == [PARA_1, PARA_2]
    assert result.detector == "paragraph"


@pytest.mark.parametrize("strategy", STRATEGIES)
def test_shouted_title_alone_gives_no_clauses(strategy):
    assert segment("SERVICE AGREEMENT", strategy) == []


@pytest.mark.parametrize("strategy", STRATEGIES)
def test_segmentation_is_deterministic(strategy):
    text = f"AGREEMENT\n\n{NUMBERED}\n\n{PARA_1}"
    assert segment(text, strategy) == segment(text, strategy)


@pytest.mark.parametrize("strategy", STRATEGIES)
def test_emitted_clauses_are_trimmed_and_non_empty(strategy):
    samples = [
        NUMBERED,
        f"{PARA_1}\n\n{PARA_2}",
        "   \n\n  \n",
        "1.\n2.\n3.\n",
        "- \n• \n(a)\n",
        "1) x\n\n\n(b) y\n-",
        "§§ 12.3.4) ??\n\n" * 5,
    ]
    for text in samples:
        for clause in segment(text, strategy):
            assert clause
            assert clause == clause.strip()


MARKER_ON_OWN_LINE = [
    "1.\nFees\n2.\nTerm\n3.\nGoverning law",
    "1.\nDefinitions\n2. The Supplier shall provide the Services with reasonable skill and care.",
    "(a)\nScope\n(b)\nPayment\n- \nNotices",
    "12.3)\nTerm\n\nThe agreement runs for twelve months from the effective date unless ended.",
]


@pytest.mark.parametrize("strategy", STRATEGIES)
def test_short_single_line_clauses_are_never_emitted(strategy):
    # NUMBERED is left out: "1. Pay rent on time." is measured with its marker.
    samples = [
        f"{PARA_1}\n\n{PARA_2}",
        "1.\n2.\n3.\n",
        "1) x\n\n\n(b) y\n-",
        "SERVICE AGREEMENT\n\n1. Rent\n2. Term\n3. Deposit",
        *MARKER_ON_OWN_LINE,
    ]
    for text in samples:
        for clause in segment(text, strategy):
            assert len(clause) >= 20 or "\n" in clause, (text, clause)


def test_marker_lines_alone_do_not_count_as_clauses():
    result = segment_document("1.\nFees\n2.\nTerm\n3.\nGoverning law", "digit_split")
    assert result.clauses == []
    assert result.detector == "paragraph"

    assert segment(MARKER_ON_OWN_LINE[1], "anchor") == [
        "The Supplier shall provide the Services with reasonable skill and care.",
    ]


def test_marker_on_own_line_keeps_a_long_body():
    text = "1.\nThe Supplier shall provide the Services with reasonable skill and care."
    assert segment(text, "anchor") == [
        "The Supplier shall provide the Services with reasonable skill and care.",
    ]


def test_header_paragraph_is_stripped():
    text = (
        "SERVICE AGREEMENT\nbetween Acme Ltd and Beta LLC\n\n"
        "1. The Provider shall deliver the services described in Schedule A.\n"
        "2. The Client shall pay the fees set out in Schedule B each month."
    )
    assert segment(text, "anchor") == [
        "The Provider shall deliver the services described in Schedule A.",
        "The Client shall pay the fees set out in Schedule B each month.",
    ]


def test_header_match_is_case_insensitive():
    text = f"Terms and Conditions of Use\n\n{PARA_1}\n\n{PARA_2}"
    assert strip_header(text) == f"{PARA_1}\n\n{PARA_2}"


def test_header_needs_a_blank_line():
    assert strip_header("AGREEMENT between the parties") == "AGREEMENT between the parties"


def test_header_title_must_be_a_whole_word():
    first = "Contractor shall deliver all goods by the agreed date."
    second = "The buyer shall pay within thirty days of receiving the invoice."
    assert segment(f"{first}\n\n{second}", "anchor") == [first, second]


def test_anchor_splits_lettered_items_and_bullets():
    text = (
        "1. Payment terms apply to every invoice issued under this agreement.\n"
        "(a) Invoices are due within thirty days of receipt.\n"
        "(b) Late payments accrue interest at two percent per month.\n"
        "- The customer bears all bank transfer charges.\n"
        "• Disputed amounts must be raised in writing."
    )
    assert segment(text, "anchor") == [
        "Payment terms apply to every invoice issued under this agreement.",
        "Invoices are due within thirty days of receipt.",
        "Late payments accrue interest at two percent per month.",
        "The customer bears all bank transfer charges.",
        "Disputed amounts must be raised in writing.",
    ]


def test_anchor_handles_multilevel_and_parenthesised_numbers():
    text = (
        "1.1. The supplier shall maintain insurance cover at all times.\n"
        "1.2) The supplier shall provide certificates of insurance on request.\n"
        "  2. Either party may terminate on ninety days written notice."
    )
    assert segment(text, "anchor") == [
        "The supplier shall maintain insurance cover at all times.",
        "The supplier shall provide certificates of insurance on request.",
        "Either party may terminate on ninety days written notice.",
    ]


def test_anchor_ignores_numbers_mid_sentence():
    text = (
        "1. Rent is due on day 1. of each month as set out in section 4. below.\n"
        "2. The tenant may not sublet without written consent of the landlord."
    )
    assert segment(text, "anchor") == [
        "Rent is due on day 1. of each month as set out in section 4. below.",
        "The tenant may not sublet without written consent of the landlord.",
    ]


def test_anchor_keeps_text_before_the_first_marker():
    preamble = "This lease is made between the landlord and the tenant named below."
    text = f"{preamble}\n1. The term of the lease is twelve months from the start date."
    assert segment(text, "anchor") == [
        preamble,
        "The term of the lease is twelve months from the start date.",
    ]


def test_short_single_line_headings_are_dropped():
    text = (
        "1. Definitions\n"
        "2. The Supplier shall provide the Services with reasonable skill and care.\n"
        "3. Fees\n"
        "4. The Customer shall pay all invoices within thirty days."
    )
    assert segment(text, "anchor") == [
        "The Supplier shall provide the Services with reasonable skill and care.",
        "The Customer shall pay all invoices within thirty days.",
    ]


def test_short_multiline_candidate_is_kept():
    assert segment("(a) Term:\ntwo years", "anchor") == ["Term:\ntwo years"]


def test_digit_split_needs_three_clauses_before_falling_back():
    text = (
        "1. The Supplier shall deliver the goods to the Customer's premises.\n\n"
        "2. The Customer shall inspect the goods within five business days."
    )
    anchored = segment_document(text, "anchor")
    assert anchored.detector == "anchor"
    assert anchored.clauses == [
        "The Supplier shall deliver the goods to the Customer's premises.",
        "The Customer shall inspect the goods within five business days.",
    ]

    split = segment_document(text, "digit_split")
    assert split.detector == "paragraph"
    assert split.clauses == [
        "1. The Supplier shall deliver the goods to the Customer's premises.",
        "2. The Customer shall inspect the goods within five business days.",
    ]


def test_digit_split_ignores_letters_and_bullets():
    text = (
        "1. Payment terms apply to every invoice issued under this agreement.\n"
        "(a) Invoices are due within thirty days of receipt.\n"
        "- The customer bears all bank transfer charges."
    )
    # One boundary only, then no blank lines: the whole text is one clause.
    assert segment(text, "digit_split") == [text]


def test_document_without_structure_is_one_clause():
    text = (
        "The parties agree that all disputes arising from this agreement "
        "will be settled by binding arbitration in London."
    )
    assert segment(text, "anchor") == [text]


def test_paragraph_fallback_rejects_short_and_shouted_blocks():
    title = "GENERAL TERMS AND CONDITIONS OF SALE FOR ALL CUSTOMERS WORLDWIDE"
    text = f"{title}\n\nShort note.\n   \n{PARA_1}\n\n\n\n{PARA_2}"
    assert segment(text, "anchor") == [PARA_1, PARA_2]


def test_unknown_strategy_is_rejected():
    with pytest.raises(ValueError, match="Unknown segmentation strategy"):
        segment(NUMBERED, "sentences")
