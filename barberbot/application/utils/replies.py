from __future__ import annotations

import re
from typing import Sequence

from barberbot.domain.entities.reservation import Reservation
from barberbot.domain.entities.service_catalog import ALLOWED_SLOTS, PROVIDERS, SERVICES

# Characters Telegram's legacy Markdown treats as entity delimiters.
MARKDOWN_SPECIAL = re.compile(r"([_*`\[])")

SERVICE_ICONS = {"Corte": "💇", "Barba": "🧔", "Corte + Barba": "💈"}

COMMANDS_TEXT = (
    "ℹ️ *Comandos disponíveis:*\n"
    "/ajuda - Ver comandos\n"
    "/servicos - Ver serviços disponíveis\n"
    "/horarios - Ver horário de atendimento\n"
    "/agendar - Iniciar um novo agendamento\n"
    "/cancelar - Cancelar um agendamento"
)

OPENING_HOURS_TEXT = "🕒 *Horário de atendimento:*\nSegunda a Sábado\nDas 09:00 às 16:00"

ASK_NAME = "👋 Vamos começar um novo agendamento!\nQual é o seu nome?"
ASK_PHONE = "📞 Qual seu número de WhatsApp (com DDD)? Ex: 11987654321"
ASK_DATE = "📅 Informe a data do agendamento (DD/MM/AAAA):"
EMPTY_INPUT = "✍️ Não entendi. Por favor, responda com um texto."

INVALID_DATE = "❌ Data inválida. Use um formato válido (DD/MM/AAAA). Ex: 01/09/2025"
SUNDAY_DATE = "⛔ Não realizamos atendimentos aos domingos."
PAST_DATE = "⛔ A data informada já passou."
TOO_FAR_DATE = "📅 Só é possível agendar até 1 ano a partir de hoje."
PAST_TIME = "⛔ Esse horário já passou. Escolha outro."

CANCEL_ASK_NAME = "❌ Vamos cancelar um agendamento. Por favor, informe seu nome:"
CANCEL_ASK_DATE = "📅 Informe a *data do agendamento* que deseja cancelar (DD/MM/AAAA):"
CANCEL_ASK_TIME = "⏰ Informe o *horário do agendamento* que deseja cancelar (HH:MM):"
CANCEL_INVALID_TIME = "❌ Horário inválido. Use o formato HH:MM."
CANCEL_NOT_FOUND = "❌ Agendamento não encontrado no sistema. Verifique as informações."

GENERIC_ERROR = "⚠️ Ocorreu um erro. Por favor, tente novamente."


def escape_markdown(text: str) -> str:
    return MARKDOWN_SPECIAL.sub(r"\\\1", text)


def format_price(value: float) -> str:
    return f"R$ {value:.2f}"


def welcome(business_name: str) -> str:
    return (
        f"👋 *Bem-vindo à {business_name}!*\n\n"
        f"{COMMANDS_TEXT}\n\n"
        f"{OPENING_HOURS_TEXT}\n\n"
        "Para começar, digite seu nome abaixo:"
    )


def services_list() -> str:
    lines = [f"{SERVICE_ICONS.get(name, '✂️')} {name} — {format_price(s.price)}" for name, s in SERVICES.items()]
    return "\n".join(lines)


def services_menu() -> str:
    return "💈 *Serviços disponíveis:*\n" + services_list()


def ask_service() -> str:
    return "Qual serviço você deseja?\n" + services_list()


def invalid_service() -> str:
    return "❌ Serviço inválido. Escolha entre: " + ", ".join(SERVICES)


def ask_barber() -> str:
    names = "\n".join(f"- {p.display_name}" for p in PROVIDERS)
    return f"💈 Escolha um barbeiro disponível:\n{names}\n\nDigite o nome do barbeiro desejado:"


def invalid_barber() -> str:
    return "❌ Barbeiro inválido. Escolha entre:\n" + ", ".join(p.display_name for p in PROVIDERS)


def offer_slots(date: str, barber_name: str, slots: Sequence[str]) -> str:
    return (
        f"⏰ Horários disponíveis para {date} com {barber_name}:\n"
        + "\n".join(slots)
        + "\n\nDigite o horário desejado (HH:MM):"
    )


def no_slots_pick_date(date: str, barber_name: str) -> str:
    return f"😓 Não há horários disponíveis para {date} com {barber_name}. Informe outra data (DD/MM/AAAA):"


def no_slots_pick_barber(date: str, barber_name: str) -> str:
    others = ", ".join(p.display_name for p in PROVIDERS if p.display_name != barber_name)
    return f"😓 Não há horários disponíveis para {date} com {barber_name}. Escolha outro barbeiro: {others}"


def invalid_time() -> str:
    return "⏰ Horário inválido. Escolha entre: " + ", ".join(ALLOWED_SLOTS)


def unavailable_time(offered: Sequence[str]) -> str:
    return "⏰ Horário indisponível. Escolha entre: " + ", ".join(offered)


def slot_taken(offered: Sequence[str]) -> str:
    return (
        "😕 Esse horário acabou de ser reservado por outra pessoa. "
        "Escolha outro: " + ", ".join(offered)
    )


def booking_summary(reservation: Reservation, barber_name: str) -> str:
    return (
        "✅ *Agendamento confirmado!*\n\n"
        f"📛 Nome: {escape_markdown(reservation.name)}\n"
        f"📱 WhatsApp: {escape_markdown(reservation.phone)}\n"
        f"🛠️ Serviço: {reservation.service}\n"
        f"💈 Barbeiro: {barber_name}\n"
        f"💰 Valor: {format_price(reservation.price)}\n"
        f"📅 Data: {reservation.date}\n"
        f"⏰ Horário: {reservation.time}"
    )


def whatsapp_confirmation(reservation: Reservation, barber_name: str) -> str:
    return (
        f"Olá {reservation.name}, seu agendamento para {reservation.service} com {barber_name} "
        f"({format_price(reservation.price)}) está confirmado para {reservation.date} "
        f"às {reservation.time} 💈"
    )


def reminder(reservation: Reservation, business_name: str) -> str:
    return (
        f"🔔 Olá {reservation.name}! Lembrete: seu horário na {business_name} é às "
        f"{reservation.time} do dia {reservation.date}. Até logo! 💈"
    )


def cancelled(name: str, date: str, time: str) -> str:
    return f"✅ Agendamento de *{escape_markdown(name)}* para *{date} às {time}* cancelado com sucesso!"
