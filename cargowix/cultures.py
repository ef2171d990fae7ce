"""Cultures (languages) supported by the WiX UI extension."""
from __future__ import annotations

from enum import Enum

from .errors import GenericError


class Cultures(str, Enum):
    AR_SA = "ar-SA"
    BG_BG = "bg-BG"
    CA_ES = "ca-ES"
    CS_CZ = "cs-CZ"
    DA_DK = "da-DK"
    DE_DE = "de-DE"
    EL_GR = "el-GR"
    EN_US = "en-US"
    ES_ES = "es-ES"
    ET_EE = "et-EE"
    FI_FI = "fi-FI"
    FR_FR = "fr-FR"
    HE_IL = "he-IL"
    HI_IN = "hi-IN"
    HR_HR = "hr-HR"
    HU_HU = "hu-HU"
    IT_IT = "it-IT"
    JA_JP = "ja-JP"
    KK_KZ = "kk-KZ"
    KO_KR = "ko-KR"
    LT_LT = "lt-LT"
    LV_LV = "lv-LV"
    NB_NO = "nb-NO"
    NL_NL = "nl-NL"
    PL_PL = "pl-PL"
    PT_BR = "pt-BR"
    PT_PT = "pt-PT"
    RO_RO = "ro-RO"
    RU_RU = "ru-RU"
    SK_SK = "sk-SK"
    SL_SI = "sl-SI"
    SR_LATN_CS = "sr-Latn-CS"
    SV_SE = "sv-SE"
    TH_TH = "th-TH"
    TR_TR = "tr-TR"
    UK_UA = "uk-UA"
    ZH_CN = "zh-CN"
    ZH_HK = "zh-HK"
    ZH_TW = "zh-TW"

    @classmethod
    def default(cls) -> "Cultures":
        return cls.EN_US

    @classmethod
    def from_str(cls, value: str) -> "Cultures":
        normalized = value.strip().lower().replace("_", "-")
        for culture in cls:
            if culture.value.lower() == normalized:
                return culture
        raise GenericError(f"Unknown culture '{value}'")

    def __str__(self) -> str:
        return self.value


__all__ = ["Cultures"]
