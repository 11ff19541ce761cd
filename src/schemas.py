# =====================================================================
# ESQUEMAS DOS FORMULÁRIOS
# =====================================================================
"""
Validação declarativa dos formulários (pydantic).

Cada campo obrigatório declara a própria mensagem em `json_schema_extra`
("mensagem"), e opcionalmente uma mensagem de formato ("invalido").
`validate_form` devolve os erros por campo, prontos para a tela.
"""

from __future__ import annotations

import re
from datetime import date, time
from typing import Annotated, Optional

from pydantic import (
    AfterValidator,
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    ValidationError,
    ValidationInfo,
    field_validator,
)

from src.formatters import format_cep, remove_formatting

CPF_RE = re.compile(r"^\d{3}\.?\d{3}\.?\d{3}-?\d{2}$")
CEP_RE = re.compile(r"^\d{5}-?\d{3}$")
EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
HHMM_RE = re.compile(r"^\d{2}:\d{2}$")
URL_RE = re.compile(r"^https?://\S+$")


def required(mensagem: str, invalido: str | None = None, **kwargs):
    extra = {"mensagem": mensagem}
    if invalido:
        extra["invalido"] = invalido
    return Field(..., json_schema_extra=extra, **kwargs)


# ---------------------------------------------------------------
# Validadores de formato (reaproveitados pelos esquemas)
# ---------------------------------------------------------------

def check_cpf(value: Optional[str]) -> Optional[str]:
    if value is None:
        return value
    if not CPF_RE.match(value):
        raise ValueError("CPF inválido")
    return remove_formatting(value)


def check_cep(value: Optional[str]) -> Optional[str]:
    if value is None:
        return value
    if not CEP_RE.match(value):
        raise ValueError("CEP inválido")
    return format_cep(value)


def check_email(value: Optional[str]) -> Optional[str]:
    if value is None:
        return value
    if not EMAIL_RE.match(value):
        raise ValueError("Email inválido")
    return value.lower()


def check_hhmm(value):
    if value is None or value == "":
        return None
    if isinstance(value, time):
        return value.strftime("%H:%M")
    if not HHMM_RE.match(str(value)):
        raise ValueError("Formato HH:MM")
    return value


def check_url(value: Optional[str]) -> Optional[str]:
    if value is None:
        return value
    if not URL_RE.match(value):
        raise ValueError("A URL da foto de perfil deve ser válida")
    return value


CPF = Annotated[str, AfterValidator(check_cpf)]
CEP = Annotated[str, AfterValidator(check_cep)]
Email = Annotated[str, AfterValidator(check_email)]
HoraHHMM = Annotated[str, BeforeValidator(check_hhmm)]
FotoURL = Annotated[str, AfterValidator(check_url)]


class FormSchema(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")

    @field_validator("*", mode="before")
    @classmethod
    def blank_to_none(cls, v):
        # campo de texto vazio = não preenchido
        if isinstance(v, str) and not v.strip():
            return None
        return v


# ---------------------------------------------------------------
# Endereço / perfil / senha
# ---------------------------------------------------------------

class EnderecoSchema(FormSchema):
    cep: CEP = required("CEP é obrigatório")
    logradouro: str = required("Logradouro é obrigatório")
    numero: str = required("Número é obrigatório")
    complemento: Optional[str] = None
    bairro: str = required("Bairro é obrigatório")
    cidade: str = required("Cidade é obrigatória")
    estado: str = required("Estado é obrigatório")


class UsuarioSchema(FormSchema):
    nome: str = required("Nome é obrigatório")
    email: Email = required("Email é obrigatório")
    cpf: CPF = required("CPF é obrigatório")
    data_nascimento: date = required("Data de nascimento é obrigatória", "Data inválida")
    telefone_principal: str = required("Telefone principal é obrigatório")
    telefone_secundario: Optional[str] = None
    contato_emergencia_nome: Optional[str] = None
    contato_emergencia_telefone: Optional[str] = None


class SenhaSchema(FormSchema):
    senha_atual: str = required("A senha atual é obrigatória")
    nova_senha: str = required("A nova senha é obrigatória")
    confirmar_senha: str = required("A confirmação de senha é obrigatória")

    @field_validator("nova_senha")
    @classmethod
    def diferente_da_atual(cls, v, info: ValidationInfo):
        if v is not None and v == info.data.get("senha_atual"):
            raise ValueError("A nova senha não pode ser igual à senha atual")
        return v

    @field_validator("confirmar_senha")
    @classmethod
    def confere(cls, v, info: ValidationInfo):
        # nova senha já reprovada: o erro fica só nela
        if "nova_senha" not in info.data:
            return v
        if v != info.data["nova_senha"]:
            raise ValueError("As senhas não conferem")
        return v


# ---------------------------------------------------------------
# Pessoas
# ---------------------------------------------------------------

class ResponsavelSchema(EnderecoSchema):
    nome: str = required("O nome é obrigatório")
    cpf: CPF = required("O CPF é obrigatório")
    email: Email = required("O email é obrigatório")
    telefone_principal: str = required("O telefone principal é obrigatório")
    telefone_secundario: Optional[str] = None
    data_nascimento: date = required("A data de nascimento é obrigatória", "Data inválida")
    contato_emergencia_nome: Optional[str] = None
    contato_emergencia_telefone: Optional[str] = None
    observacoes: Optional[str] = None


VINCULOS = ["CLT", "PJ", "Voluntário", "Estágio", "Temporário"]
STATUS_FUNCIONARIO = ["ativo", "licença", "afastado", "inativo"]


class FuncionarioSchema(EnderecoSchema):
    vinculo: str = required("O tipo de vínculo é obrigatório")
    nome: str = required("O nome completo é obrigatório")
    cpf: CPF = required("O CPF é obrigatório")
    email: Email = required("O email é obrigatório")
    data_nascimento: date = required("A data de nascimento é obrigatória", "Data inválida")
    papel: str = "Cuidador"
    cargo: str = required("O cargo é obrigatório")
    registro_profissional: Optional[str] = None
    data_admissao: date = required("A data de admissão é obrigatória", "Data inválida")
    telefone_principal: str = required("O telefone principal é obrigatório")
    telefone_secundario: Optional[str] = None
    contato_emergencia_nome: Optional[str] = None
    contato_emergencia_telefone: Optional[str] = None


SEXOS = ["Masculino", "Feminino", "Outro"]
ESTADOS_CIVIS = ["Solteiro(a)", "Casado(a)", "Divorciado(a)", "Viúvo(a)", "União estável"]
NIVEIS_DEPENDENCIA = ["Grau I", "Grau II", "Grau III"]


class ResidenteSchema(FormSchema):
    id_responsavel: int = required("O responsável é obrigatório", ge=1)
    nome: str = required("O nome completo do paciente é obrigatório")
    data_nascimento: date = required("A data de nascimento é obrigatória", "Data inválida")
    cpf: CPF = required("O CPF do paciente é obrigatório")
    sexo: Optional[str] = None
    data_admissao: date = required("A data de admissão é obrigatória", "Data inválida")
    estado_civil: Optional[str] = None
    naturalidade: Optional[str] = None
    quarto: Optional[str] = None
    dependencia: Optional[str] = None
    plano_saude: Optional[str] = None
    numero_carteirinha: Optional[str] = None
    observacoes: Optional[str] = None
    responsavel_parentesco: Optional[str] = None
    foto: Optional[FotoURL] = None


# ---------------------------------------------------------------
# Registros do dia a dia
# ---------------------------------------------------------------

RECORRENCIAS = {
    "unico": "único",
    "horas": "horas",
    "dias": "dias",
    "meses": "meses",
    "vezes": "vezes",
}
STATUS_MEDICAMENTO = ["ativo", "suspenso", "finalizado"]


class MedicamentoSchema(FormSchema):
    id_residente: int = required("Residente é obrigatório", ge=1)
    nome: str = required("Nome do medicamento é obrigatório")
    dosagem: str = required("Dosagem é obrigatória")
    dose: str = required("Dose é obrigatória")
    data_inicio: date = required("Data de início é obrigatória", "Data inválida")
    horario_inicio: HoraHHMM = required("Horário de início é obrigatório")
    data_fim: Optional[date] = None
    recorrencia: str = required("Recorrência é obrigatória")
    intervalo: int = required("Intervalo é obrigatório", "Intervalo deve ser ao menos 1", ge=1)
    efeitos_colaterais: Optional[str] = None
    observacao: Optional[str] = None
    saude_relacionada: Optional[str] = None
    foto: Optional[str] = None


class ConsultaSchema(FormSchema):
    id_residente: int = required("Residente é obrigatório", "Selecione um residente", ge=1)
    data_consulta: date = required("Data é obrigatória", "Data inválida")
    horario: HoraHHMM = required("Horário é obrigatório")
    medico: str = required("Médico é obrigatório")
    motivo_consulta: str = required("Motivo é obrigatório")
    tratamento_indicado: Optional[str] = None
    observacao: Optional[str] = None


CATEGORIAS_ATIVIDADE = ["Física", "Cognitiva", "Social", "Recreativa", "Terapêutica", "Outra"]
STATUS_ATIVIDADE = ["agendada", "concluida", "cancelada"]


class AtividadeSchema(FormSchema):
    residentes: list[int] = required(
        "Selecione ao menos um residente", "Selecione ao menos um residente", min_length=1
    )
    nome: str = required("Nome da atividade é obrigatório")
    categoria: str = required("Categoria é obrigatória")
    data: date = required("Data é obrigatória", "Data inválida")
    horario_inicio: Optional[HoraHHMM] = None
    horario_fim: Optional[HoraHHMM] = None
    observacao: Optional[str] = None
    local: Optional[str] = None
    status: str = required("Status é obrigatório")


CATEGORIAS_OCORRENCIA = ["Queda", "Saúde", "Comportamento", "Alimentação", "Medicação", "Outros"]


class OcorrenciaSchema(FormSchema):
    titulo: str = required("Título é obrigatório")
    data: date = required("Data é obrigatória", "Data inválida")
    hora: HoraHHMM = required("Hora é obrigatória")
    descricao: Optional[str] = None
    providencias: Optional[str] = None
    id_residente: int = required("Residente é obrigatório", ge=1)
    id_funcionario: int = required("Funcionário é obrigatório", ge=1)
    categoria: str = required("Categoria é obrigatória")


TIPOS_PREFERENCIA = ["Alimentação", "Atividades", "Cuidados", "Rotina", "Outros"]


class PreferenciaSchema(FormSchema):
    id_residente: int = required("Residente é obrigatório", "Selecione um residente", ge=1)
    tipo_preferencia: str = required("Categoria é obrigatória")
    titulo: str = required("Título é obrigatório")
    descricao: str = required("Descrição é obrigatória")
    foto_url: Optional[str] = None


# ---------------------------------------------------------------
# Erros por campo
# ---------------------------------------------------------------

def _field_message(schema: type[BaseModel], field: str, err: dict) -> str:
    if err["type"] == "value_error":
        return str(err["ctx"]["error"])

    info = schema.model_fields.get(field)
    extra = (info.json_schema_extra or {}) if info else {}
    missing = err["type"] == "missing" or err.get("input") is None
    if missing:
        return extra.get("mensagem") or "Campo obrigatório"
    return extra.get("invalido") or extra.get("mensagem") or "Valor inválido"


def field_errors(schema: type[BaseModel], exc: ValidationError) -> dict[str, str]:
    """Converte o ValidationError em {campo: mensagem} (primeiro erro de cada campo)."""
    out: dict[str, str] = {}
    for err in exc.errors():
        field = str(err["loc"][0]) if err["loc"] else "__form__"
        out.setdefault(field, _field_message(schema, field, err))
    return out


def validate_form(schema: type[BaseModel], data: dict):
    """
    Valida `data` contra o esquema.
    Retorna (modelo, {}) ou (None, {campo: mensagem}).
    """
    try:
        return schema.model_validate(data), {}
    except ValidationError as exc:
        return None, field_errors(schema, exc)


def to_record(model: BaseModel, exclude: set[str] | None = None) -> dict:
    """Modelo validado -> dict pronto para o Supabase (datas em ISO)."""
    return model.model_dump(mode="json", exclude=exclude)


# ---------------------------------------------------------------
# Etapas do cadastro de paciente (wizard)
# ---------------------------------------------------------------

TIPOS_RESPONSAVEL = ("novo", "existente")


class ResponsavelExistenteStep(FormSchema):
    resp_existente_id: int = required(
        "É obrigatório selecionar um responsável", "Selecione um responsável válido", ge=1
    )


class ResponsavelNovoStep(FormSchema):
    resp_nome_completo: str = required("O nome do responsável é obrigatório")
    resp_cpf: CPF = required("O CPF do responsável é obrigatório")
    resp_telefone_principal: str = required("O telefone principal do responsável é obrigatório")
    resp_telefone_secundario: Optional[str] = None
    resp_email: Email = required("O email do responsável é obrigatório")
    resp_cep: CEP = required("O CEP é obrigatório")
    resp_logradouro: str = required("O logradouro é obrigatório")
    resp_numero: str = required("O número é obrigatório")
    resp_complemento: Optional[str] = None
    resp_bairro: str = required("O bairro é obrigatório")
    resp_cidade: str = required("A cidade é obrigatória")
    resp_estado: str = required("O estado é obrigatório")
    resp_observacoes: Optional[str] = None


class PacienteStep(FormSchema):
    idoso_nome_completo: str = required("O nome completo do paciente é obrigatório")
    idoso_nome_social: Optional[str] = None
    idoso_data_nascimento: date = required("A data de nascimento é obrigatória", "Data inválida")
    idoso_cpf: CPF = required("O CPF do paciente é obrigatório")
    idoso_sexo: Optional[str] = None


class DadosAdicionaisStep(FormSchema):
    idoso_estado_civil: str = required("O estado civil é obrigatório")
    idoso_naturalidade: Optional[str] = None
    idoso_localizacao_quarto: Optional[str] = None
    idoso_nivel_dependencia: Optional[str] = None
    idoso_plano_saude: Optional[str] = None
    idoso_numero_carteirinha: Optional[str] = None
    idoso_observacoes: Optional[str] = None
    idoso_foto_perfil_url: Optional[FotoURL] = None
    idoso_responsavel_parentesco: str = required("O parentesco com o responsável é obrigatório")
