# Prompt text for the transcription and grading models.
# Subject / test-type keys match the values sent by the frontend.

from __future__ import annotations

from typing import Iterable, Optional

from schemas.correction import ExtractedQuestion

SUBJECT_INSTRUCTIONS = {
    "italiano": "Valuta correttezza grammaticale, sintassi, ortografia e qualità espositiva.",
    "matematica": "Valuta la correttezza dei calcoli, la logica di risoluzione e l'uso delle formule.",
    "storia": "Valuta la conoscenza degli eventi storici e la capacità di contestualizzarli.",
    "geografia": "Valuta la conoscenza geografica e la capacità di localizzazione.",
    "scienze": "Valuta la conoscenza scientifica e la comprensione dei fenomeni.",
    "inglese": "Valuta la correttezza grammaticale e il lessico.",
}
DEFAULT_SUBJECT_INSTRUCTIONS = "Valuta la correttezza delle risposte."

TEST_TYPE_INSTRUCTIONS = {
    "aperte": "Domande a risposta aperta: valuta completezza e accuratezza.",
    "chiuse": "Domande a risposta chiusa: valuta la correttezza della risposta.",
    "miste": "La verifica contiene domande aperte e chiuse.",
    "dettato": "Valuta la correttezza ortografica e la punteggiatura.",
    "problemi": "Valuta il procedimento risolutivo e i calcoli.",
    "comprensione": "Valuta la capacità di comprendere e interpretare il testo.",
    "riassunto": "Valuta la capacità di sintesi.",
}
DEFAULT_TEST_TYPE_INSTRUCTIONS = "Valuta le risposte."

EXTRACTION_PROMPT = """Analizza l'immagine di una verifica scolastica italiana ({subject}).
Trascrivi tutto il testo leggibile:
- il nome dello studente, se presente
- le domande numerate
- le risposte scritte a mano dallo studente

Rispondi SOLO con JSON valido in questo formato:
{{
  "studentName": "nome dello studente o stringa vuota",
  "questions": [
    {{"number": 1, "text": "testo della domanda", "studentAnswer": "risposta dello studente"}}
  ]
}}"""

EVALUATION_SYSTEM_PROMPT = "Sei un insegnante italiano. Rispondi solo in JSON."

EVALUATION_RESPONSE_SHAPE = (
    '{"questions":[{"number":1,"score":2.0,"correctAnswer":"risposta corretta",'
    '"feedback":"commento","isCorrect":true}],"overallFeedback":"commento generale"}'
)


def instructions_for_subject(subject: str) -> str:
    return SUBJECT_INSTRUCTIONS.get(subject.strip().lower(), DEFAULT_SUBJECT_INSTRUCTIONS)


def instructions_for_test_type(test_type: str) -> str:
    return TEST_TYPE_INSTRUCTIONS.get(test_type.strip().lower(), DEFAULT_TEST_TYPE_INSTRUCTIONS)


def extraction_prompt(subject: str) -> str:
    return EXTRACTION_PROMPT.format(subject=subject)


def evaluation_prompt(
    questions: Iterable[ExtractedQuestion],
    subject: str,
    test_type: str,
    points_per_question: float,
    custom_instructions: Optional[str] = None,
) -> str:
    blocks = "\n\n".join(
        f"DOMANDA {q.number}: {q.text}\nRISPOSTA: {q.student_answer or '[nessuna]'}"
        for q in questions
    )
    criteria = [instructions_for_subject(subject), instructions_for_test_type(test_type)]
    if custom_instructions and custom_instructions.strip():
        criteria.append(f"Istruzioni del docente: {custom_instructions.strip()}")

    return (
        f"Sei un insegnante italiano esperto di {subject}. Valuta questa verifica.\n\n"
        "CRITERI:\n" + "\n".join(criteria) + "\n\n"
        f"Punteggio massimo per domanda: {points_per_question:.1f} punti.\n\n"
        f"DOMANDE E RISPOSTE:\n{blocks}\n\n"
        f"Rispondi in JSON:\n{EVALUATION_RESPONSE_SHAPE}"
    )
