"""Prompt templates for turning a transcription into a structured document.

Each processing mode has one renderer that emits a fixed Spanish template:
a role/objective preamble, the transcription between ``---`` markers, and
the exact Markdown skeleton the model must fill in. Rendering is pure.
"""

from __future__ import annotations

from typing import Callable, Mapping

from audio_processor.domain.models import ProcessingMode

NOT_PROVIDED = "Información no proporcionada en el audio"
NOT_SPECIFIED = "No especificada"
INSTRUCTIONS_MARKER = "[INSTRUCCIONES_DEL_USUARIO]"


def _transcription_block(title: str, transcription: str) -> str:
    return f"# {title}\n---\n{transcription}\n---\n"


def _render_medical(transcription: str, _custom_instructions: str) -> str:
    return (
        "# ROL Y OBJETIVO\n"
        "Actúa como un médico especialista altamente competente. Tu tarea es analizar la "
        "transcripción de una consulta de audio y generar un informe médico detallado, "
        "profesional y estructurado en español.\n"
        "Utiliza formato Markdown para los encabezados (ej. `## Anamnesis`) y texto en "
        "negrita (`**texto**`).\n\n"
        "# ANÁLISIS INICIAL\n"
        "1. Lee la transcripción completa para entender el contexto.\n"
        "2. Identifica la terminología médica para determinar la especialidad más probable "
        "(ej. Cardiología, Pediatría, Neurología, etc.).\n\n"
        f"{_transcription_block('TRANSCRIPCIÓN DEL AUDIO', transcription)}\n"
        "# GENERACIÓN DEL INFORME MÉDICO\n"
        "Crea el informe utilizando estrictamente la siguiente estructura. Si falta "
        f'información en la transcripción para alguna sección, indica "{NOT_PROVIDED}".\n\n'
        "**Especialidad Identificada:** [Tu identificación de la especialidad]\n\n"
        "## Informe Médico\n\n"
        "**Datos del Paciente:**\n"
        "- Nombre: [Extraer de la transcripción, si se menciona]\n"
        "- Edad: [Extraer de la transcripción, si se menciona]\n\n"
        f'**Fecha de la Consulta:** [Si no se menciona, indica "{NOT_SPECIFIED}"]\n\n'
        "**Motivo de la Consulta:** [Resume la razón principal de la visita del paciente]\n\n"
        "## Anamnesis\n"
        "[Detalla los síntomas, historial médico relevante y antecedentes mencionados por "
        "el paciente]\n\n"
        "## Exploración Física\n"
        "[Describe los hallazgos de la exploración física si se mencionan en la conversación]\n\n"
        "## Impresión Diagnóstica\n"
        "[Basado en la información, formula un diagnóstico principal o diferencial]\n\n"
        "## Plan de Actuación y Tratamiento\n"
        "[Detalla los pasos a seguir, como pruebas adicionales, medicación prescrita o "
        "recomendaciones]\n"
    )


def _render_meeting(transcription: str, _custom_instructions: str) -> str:
    return (
        "# ROL Y OBJETIVO\n"
        "Actúa como un secretario ejecutivo o asistente de dirección. Tu objetivo es generar "
        "un acta de reunión formal y objetiva en español, basada en la transcripción de audio "
        "proporcionada.\n"
        "Utiliza formato Markdown para los encabezados, negritas, listas y la tabla de "
        "acciones.\n\n"
        f"{_transcription_block('TRANSCRIPCIÓN DEL AUDIO', transcription)}\n"
        "# GENERACIÓN DEL ACTA DE REUNIÓN\n"
        "Utiliza la siguiente estructura para crear el acta. Extrae toda la información "
        "relevante de la transcripción.\n\n"
        "## Acta de Reunión: [Asunto principal de la reunión]\n\n"
        f'**Fecha:** [Extraer de la transcripción o indicar "{NOT_SPECIFIED}"]\n'
        f'**Hora:** [Extraer de la transcripción o indicar "{NOT_SPECIFIED}"]\n'
        f'**Lugar:** [Extraer de la transcripción o indicar "{NOT_SPECIFIED}"]\n\n'
        "**Asistentes:**\n"
        "- [Lista de nombres mencionados]\n\n"
        "### Resumen Ejecutivo\n"
        "[Un párrafo breve que resuma los puntos más importantes y las decisiones clave de "
        "la reunión]\n\n"
        "### Temas Tratados\n"
        "1. [Tema 1]\n"
        "2. [Tema 2]\n"
        "3. ...\n\n"
        "### Desarrollo de la Reunión\n"
        "[Resume los puntos clave discutidos para cada tema, las opiniones presentadas y los "
        "argumentos principales]\n\n"
        "### Acuerdos y Decisiones\n"
        "- [Acuerdo 1]\n"
        "- [Acuerdo 2]\n"
        "- ...\n\n"
        "### Acciones a Realizar\n"
        "Crea una tabla con las siguientes columnas: Acción, Responsable, Fecha Límite.\n"
        "| Acción | Responsable | Fecha Límite |\n"
        "|---|---|---|\n"
        "| [Tarea específica] | [Persona o equipo asignado] | [Fecha límite mencionada] |\n"
    )


def _render_summary(transcription: str, _custom_instructions: str) -> str:
    return (
        "# ROL Y OBJETIVO\n"
        "Tu tarea es analizar la siguiente transcripción de audio y generar un resumen "
        "conciso y claro en español. El formato debe ser una lista de puntos clave "
        "(bullet points).\n"
        "Utiliza formato Markdown para los encabezados (ej. `### Puntos Clave`) y las listas "
        "(ej. `- Punto Clave`).\n\n"
        f"{_transcription_block('TRANSCRIPCIÓN DEL AUDIO', transcription)}\n"
        "# GENERACIÓN DEL RESUMEN\n"
        "Crea un resumen que destaque los siguientes elementos en formato de lista:\n\n"
        "### Puntos Clave\n"
        "- [Los temas más importantes discutidos]\n\n"
        "### Preguntas Principales\n"
        "- [Las preguntas centrales que se hicieron durante la conversación]\n\n"
        "### Conclusiones o Decisiones\n"
        "- [Los resultados o acuerdos a los que se llegaron]\n"
    )


def _render_custom(transcription: str, custom_instructions: str) -> str:
    return (
        "# ROL Y OBJETIVO\n"
        "Actúa como un generador de documentos a medida. Tu única fuente de información es "
        "la transcripción de audio proporcionada. Debes seguir estrictamente las "
        "instrucciones del usuario para crear el documento solicitado.\n"
        "Cuando sea apropiado para la solicitud del usuario, utiliza formato Markdown para "
        "la estructura (encabezados, negritas, listas, etc.) para crear un documento bien "
        "formateado.\n\n"
        f"{_transcription_block('TRANSCRIPCIÓN COMPLETA DEL AUDIO', transcription)}\n"
        "# INSTRUCCIONES DEL USUARIO\n"
        "---\n"
        f"{INSTRUCTIONS_MARKER}\n"
        f"{custom_instructions}\n"
        "---\n\n"
        "# TAREA\n"
        f"Analiza en profundidad las {INSTRUCTIONS_MARKER} para entender el formato, tono, "
        "estructura y objetivo del documento. Luego, utiliza la información de la "
        "transcripción para generar el documento que cumpla al 100% con la solicitud del "
        "usuario.\n"
    )


PROMPT_RENDERERS: Mapping[ProcessingMode, Callable[[str, str], str]] = {
    ProcessingMode.MEDICAL: _render_medical,
    ProcessingMode.MEETING: _render_meeting,
    ProcessingMode.SUMMARY: _render_summary,
    ProcessingMode.CUSTOM: _render_custom,
}


def build_prompt(
    mode: ProcessingMode | str,
    transcription: str,
    custom_instructions: str | None = None,
) -> str:
    """Render the document-generation prompt for ``mode``.

    TRANSCRIPTION_ONLY and unknown modes have no template; the transcription
    comes back unchanged.
    """

    try:
        mode = ProcessingMode(mode)
    except ValueError:
        return transcription

    renderer = PROMPT_RENDERERS.get(mode)
    if renderer is None:
        return transcription
    return renderer(transcription, custom_instructions or "")


__all__ = ["PROMPT_RENDERERS", "NOT_PROVIDED", "NOT_SPECIFIED", "build_prompt"]
