"""Prompt texts for the completion stages.

Stage **03** (outline), the per-field spacing repair, the validation check and
the spoken-word reformatting all talk French to the model; the wording lives
here so the stage modules stay about control flow.
"""

from __future__ import annotations

OUTLINE_JSON_HINT = "Réponds UNIQUEMENT en JSON valide, sans texte additionnel."

OUTLINE_SYSTEM_PROMPT = (
    "Tu es un professeur de français qui aide un élève à préparer une dissertation "
    "ou un commentaire. Tu réponds toujours en français correct."
)

_OUTLINE_USER_TEMPLATE = """
Tu reçois la transcription brute (français) d'un élève qui lit et explique son sujet et ses consignes. Ta mission est de comprendre précisément la tâche demandée et de produire un plan d'essai complet en français.

Exigences:
- Distingue ce qui est pertinent pour la tâche de ce qui ne l'est pas. Ignore le bruit.
- Propose un plan détaillé en trois parties avec sous-parties (I/II/III, A/B, 1/2) et les mouvements rhétoriques.
- Rédige aussi: une introduction très précise (sans blabla), et une conclusion courte qui répond clairement.
- Fournis en plus un "brouillon" de texte complet qui sera lu par TTS, en français clair, en un seul paragraphe continu (sans listes, sans puces, sans Markdown, sans retours à la ligne inutiles). Ne limite pas la longueur artificiellement.
- Utilise des crochets [A REMPLIR] pour les éléments spécifiques à compléter par l'élève (dates, notions, exemples, sources).
- Si le type d'exercice n'est pas clair, fais une hypothèse explicite.

Réponds STRICTEMENT en JSON valide UTF-8, sans texte additionnel, avec ce schéma exact.

FORMATAGE CRITIQUE:
- Écris le texte français NORMALEMENT avec des espaces entre les mots
- NE sépare JAMAIS les caractères d'un mot par des espaces
- Exemple CORRECT: "L'énoncé demande une analyse"
- Exemple INCORRECT: "L ' é n o n c é   d e m a n d e   u n e   a n a l y s e"
- Exemple INCORRECT: "L'énoncédemandeuneanalyse" (mots collés)

Schéma JSON:
{{
  "task_understanding": "string",
  "introduction": "string",
  "detailed_plan": "string",
  "conclusion": "string",
  "draft": "string"
}}

- task_understanding: 2 à 4 phrases, ce que l'énoncé demande et ses contraintes
- introduction: amorce brève, définition/situation, problématique, annonce du plan
- detailed_plan: plan hiérarchisé I/II/III avec A/B/1/2
- conclusion: bilan, réponse et ouverture (1 à 3 phrases)
- draft: brouillon lisible par TTS, un seul paragraphe, sans listes

Transcription de l'élève (verbatim):
---
{transcript}
---
"""

FIELD_REPAIR_TEMPLATE = """Ce texte français a des espaces dans les mots. Corrige uniquement l'espacement, sans changer le sens, et retourne UNIQUEMENT le texte corrigé.

Exemple: "L'é non cé demande une analy se" → "L'énoncé demande une analyse"

Texte à corriger:
{text}

Texte corrigé:"""

VALIDATION_CHECK_TEMPLATE = """Examine this French text and answer with YES or NO only:
Does this text have formatting problems like spaces inside words (e.g. "L'é non cé" instead of "L'énoncé")?

Text to examine:
{text}

Answer (YES/NO):"""

VALIDATION_FIX_TEMPLATE = """Fix this French text that has spaces inside words. Return ONLY the corrected text, nothing else.

Example of problem: "L'é non cé demande une analy se"
Should become: "L'énoncé demande une analyse"

Text to fix:
{text}

Corrected text:"""

REFORMAT_SYSTEM_PROMPT = """Tu es un expert en formatage de texte français pour synthèse vocale (TTS).

Ton rôle est de prendre du texte qui peut contenir des erreurs de formatage (espaces mal placés, caractères cassés, etc.) et de le reformater parfaitement pour qu'il soit lu naturellement par un système TTS français.

Règles importantes :
1. Corrige tous les problèmes d'espacement et de caractères cassés
2. Assure-toi que tous les mots français sont correctement écrits
3. Utilise une ponctuation appropriée pour la lecture vocale
4. Garde le sens et le contenu original intact
5. Produis un texte fluide et naturel pour la lecture à voix haute
6. Évite les abréviations, écris les mots en entier
7. Assure-toi que les phrases sont bien structurées

Réponds UNIQUEMENT avec le texte reformaté, sans commentaires ni explications."""

REFORMAT_USER_TEMPLATE = (
    "Reformate ce texte pour qu'il soit parfait pour la synthèse vocale française :\n\n{text}"
)


def build_outline_user_prompt(transcript: str) -> str:
    return _OUTLINE_USER_TEMPLATE.format(transcript=transcript).strip()


def build_field_repair_prompt(text: str) -> str:
    return FIELD_REPAIR_TEMPLATE.format(text=text)


__all__ = [
    "OUTLINE_JSON_HINT",
    "OUTLINE_SYSTEM_PROMPT",
    "REFORMAT_SYSTEM_PROMPT",
    "REFORMAT_USER_TEMPLATE",
    "VALIDATION_CHECK_TEMPLATE",
    "VALIDATION_FIX_TEMPLATE",
    "build_field_repair_prompt",
    "build_outline_user_prompt",
]
