"""
Rule catalog (R1–R5) and grade definitions (S0–S2).

The model receives this catalog inside its system instruction and the UI renders the
same entries, so both always describe the same rules.
"""
from typing import Literal
from pydantic import BaseModel, Field

RuleId = Literal["R1", "R2", "R3", "R4", "R5"]
SafetyGrade = Literal["S0", "S1", "S2"]

RULE_IDS: tuple[str, ...] = ("R1", "R2", "R3", "R4", "R5")
GRADES: tuple[str, ...] = ("S0", "S1", "S2")


class RuleDefinition(BaseModel):
    """One moderation rule: objective criteria plus known offending products."""

    id: RuleId
    name: str
    criteria: list[str] = Field(default_factory=list)
    examples: list[str] = Field(default_factory=list)


class GradeDefinition(BaseModel):
    label: str
    intervention: str
    logic: str
    color: str  # banner color key: green | orange | red


RULES: list[RuleDefinition] = [
    RuleDefinition(
        id="R1",
        name="生理不适",
        criteria=[
            "商品图含有逼真的血腥、体液等元素",
            "密集纹理，重复性密集排列的小单元（如密集小孔、虫卵状）",
        ],
        examples=["肥牛袜子 (模拟生肉肌肉纹理)"],
    ),
    RuleDefinition(
        id="R2",
        name="人身攻击/歧视",
        criteria=[
            "商品图或文字暗示特定人群（例如国家领导人等）为贬义对象",
            "涉及种族、地域、身体特征、职业的负面刻板印象",
        ],
        examples=["猪脸T恤 (将人脸替换为猪脸)", "非洲小孩 (种族刻板印象)"],
    ),
    RuleDefinition(
        id="R3",
        name="负面/危险联想",
        criteria=[
            "商品形态或使用场景类似危险物品或行为",
            "可能引发对自残、暴力、疾病、不体面场景的联想",
        ],
        examples=["粗麻绳围巾 (视觉形态像上吊绳)", "精神病院病号服 (关联疾病)"],
    ),
    RuleDefinition(
        id="R4",
        name="过度猎奇/恶搞",
        criteria=[
            "主图使用非商品实物图（如表情包、PS拼贴、扭曲特效）",
            "图片出现明显的空间扭曲、五官错位等非正常视觉效果",
            "主图包含人体器官特写",
        ],
        examples=["发声萝卜挂件 (商品图明显扭曲)", "大脚丫捏捏乐 (器官特写)", "搞怪手机壳 (器官特写)"],
    ),
    RuleDefinition(
        id="R5",
        name="价值观导向不良",
        criteria=["标题或内容与公序良俗明显冲突，宣传投机取巧、不劳而获"],
        examples=["如何让富婆爱上你 (价值观导向不良)"],
    ),
]

GRADE_DEFINITIONS: dict[str, GradeDefinition] = {
    "S0": GradeDefinition(
        label="【正常内容】",
        intervention="正常推荐",
        logic="放心推",
        color="green",
    ),
    "S1": GradeDefinition(
        label="【低质内容】",
        intervention="限流：首页/热门不推，搜索降权",
        logic="不主动推，但允许用户主动找",
        color="orange",
    ),
    "S2": GradeDefinition(
        label="【违规内容】",
        intervention="过滤：推荐流拦截，搜索降权+提示",
        logic="主动保护用户，避免舆情风险",
        color="red",
    ),
}

TOTAL_RULES = len(RULES)

_RULES_BY_ID = {r.id: r for r in RULES}


def get_rule(rule_id: str) -> RuleDefinition:
    """Look up a rule by id. Raises KeyError for ids outside R1–R5."""
    return _RULES_BY_ID[rule_id]


def get_grade(grade: str) -> GradeDefinition:
    return GRADE_DEFINITIONS[grade]
