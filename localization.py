"""
Localization lookup for the CatGuard intake questionnaire.

Two locales are supported:
    zh - Traditional Chinese (Hong Kong), the default
    en - English

Lookup policy:
    translate(locale, key) returns the table entry for the key in that locale.
    A key missing from the table returns the key itself, so a gap in the table
    shows up on screen instead of breaking the page. Each missing key is logged
    once with the [I18N][MISS] tag.

English strings stay within Latin-1 so the report renders with the core PDF
fonts; Chinese text needs REPORT_FONT_PATH (see config.py).
"""
from enum import Enum
from typing import Dict, Set, Tuple


class Locale(str, Enum):
    ZH = "zh"
    EN = "en"


DEFAULT_LOCALE = Locale.ZH


TRANSLATIONS: Dict[Locale, Dict[str, str]] = {
    Locale.ZH: {
        # Hero & footer
        "hero.badge": "度尺前預先評估",
        "hero.title": "《DF 貓咪居家安全顧問問卷》",
        "hero.description": "透過此問卷，我們將預先了解您家中的環境與貓咪習性，以便度尺時為您提供最適合的防護方案。",
        "footer.copyright": "DF 創意家居 · 全港領先防貓網工程公司",
        "footer.tagline": "成為您貓咪一生的守護顧問",

        # Stages
        "stage.basic_info": "基本資料",
        "stage.scored_questions": "風險評估",
        "stage.confirmation": "確認提交",
        "stage.submitted": "評估報告",

        # Basic info fields
        "field.address": "Whatsapp 電話號碼 / 度尺地址",
        "field.building_type": "戶型",
        "field.building_type.apartment": "大廈",
        "field.building_type.house": "村屋/別墅",
        "field.floor_level": "樓層",
        "field.window_count": "窗數量",
        "field.door_count": "門數量",
        "field.heaviest_cat_weight": "最重貓咪體重",

        # Scored questions
        "question.cat_count.title": "一、家中的貓咪總數？",
        "question.cat_count.opt1": "1 分：1 隻",
        "question.cat_count.opt2": "2 分：2 隻",
        "question.cat_count.opt3": "3 分：3 隻",
        "question.cat_count.opt4": "4 分：4 隻或以上",
        "question.edge_behavior.title": "二、貓咪的窗邊行為模式？",
        "question.edge_behavior.opt0": "0 分：只會睡在窗邊或遠觀",
        "question.edge_behavior.opt1": "1 分：偶爾會跳上窗台，但不會推網或抓網",
        "question.edge_behavior.opt2": "2 分：經常會扒窗、推網或抓咬網邊",
        "question.edge_behavior.opt3": "3 分：有嘗試過掙脫或打開紗窗、推開舊網的行為",
        "question.structure.title": "三、窗戶結構與通風習慣？",
        "question.structure.opt0": "0 分：門窗沒有老化，只會有時打開部份門窗",
        "question.structure.opt1": "1 分：門窗有老化情況，只會有時打開部份門窗",
        "question.structure.opt2": "2 分：門窗沒有老化，會長時間打開門窗",
        "question.structure.opt3": "3 分：門窗有老化情況，並會長時間打開門窗",
        "question.personality.title": "四、您最活潑的貓咪性格屬於？",
        "question.personality.opt0": "0 分：安靜、年老、不愛跳躍",
        "question.personality.opt1": "1 分：一般好動，喜歡在貓跳台上休息",
        "question.personality.opt2": "2 分：極度活躍，經常玩追逐遊戲或跑跳",
        "question.personality.opt3": "3 分：有「暴衝」或貓咪間打架追逐，可能高速衝撞窗口",
        "question.environment.title": "五、家中是否有其他高危險環境？",
        "question.environment.opt0": "0 分：無",
        "question.environment.opt1": "1 分：貓跳台/櫃子緊鄰窗戶，貓咪可直接跳上窗台",
        "question.environment.opt2": "2 分：家中經常有幼童或大型寵物，可能誤推防貓網",
        "question.environment.opt3": "3 分：以上兩點皆有",
        "question.expectation.title": "六、您對「防貓網」的安裝預期？",
        "question.expectation.opt0": "0 分：安全穩固，貓咪生命安全最重要",
        "question.expectation.opt1": "1 分：安全固然重要，但希望兼顧最大採光和美觀",
        "question.expectation.opt2": "2 分：希望用最實惠的方案，能擋住貓咪就足夠",
        "question.expectation.opt3": "3 分：希望做出來「視覺隱形」，並且希望盡量節省預算",

        # Short score labels (confirmation + report)
        "score.cat_count": "貓咪數量",
        "score.edge_behavior": "窗邊行為模式",
        "score.structure": "窗戶結構習慣",
        "score.personality": "貓咪性格",
        "score.environment": "高危環境",
        "score.expectation": "安裝預期",
        "score.total": "總分",

        # Notices
        "notice.fill_all": "請填寫所有必填項目",
        "notice.fill_all_desc": "所有欄位均為必填",
        "notice.complete_all": "請完成所有評分問題",
        "notice.complete_all_desc": "請為每個問題選擇一個選項",
        "notice.success": "提交成功！",
        "notice.success_desc": "您的評估已成功提交，我們的團隊會盡快與您聯繫。",
        "notice.error": "提交失敗",
        "notice.error_desc": "請稍後再試或聯繫我們",
        "notice.export_error": "匯出失敗",
        "notice.export_error_desc": "請稍後再試",

        # Units
        "unit.pieces": "個",
        "unit.kg": "Kg",
        "unit.points": "分",

        # Report page 1
        "report.title": "貓咪居家安全評估報告",
        "report.date": "評估日期：",
        "report.tier.low": "【穩健安全級別】",
        "report.tier.medium": "【加固防護級別】",
        "report.tier.high": "【極高風險警告】",
        "report.assessment": "評估結果：",
        "report.recommendation": "DF 專業建議：",
        "report.advice": "安全顧問叮囑：",
        "report.basic_info": "基本資料",
        "report.score_breakdown": "評分明細",
        "report.thanks": "感謝您完成《DF 貓咪居家安全顧問問卷》",
        "report.thanks_desc": "我們相信，作為全港領先的防貓網工程公司，我們的職責不僅是安裝一張網，更是成為您貓咪一生的守護顧問。",
        "report.thanks_note": "我們的專業團隊將會在預約時間準時上門，為您度身訂造「最安全」的守護方案。",

        # Tier narratives
        "risk.low.assessment": "根據您的初步評估，您的家居環境屬於「低風險」。您的貓咪性格較溫和，且家中環境穩定，發生突發衝擊的機會相對較低。",
        "risk.low.recommendation": "選用 DF 標準系列防貓網已足以應付日常需要。雖然風險較低，但我們絕不掉以輕心。度尺師傅上門時，會因應你和貓貓的生活習慣，提供款式、位置和安裝的專業意見。",
        "risk.low.advice": "「即使主子性格文靜，窗戶安全亦是防患未然。我們會確保安裝後的網面平整且受力均勻，給您最安心的防護。」",
        "risk.medium.assessment": "注意！您的評估顯示家居存在「中度風險」。這通常與多貓家庭、貓咪性格較活潑（如喜愛抓網或跳躍）有關。沒有測試的防貓網結構在面對連續衝擊時，穩定性可能不足。",
        "risk.medium.recommendation": "我們強烈建議選用 DF 專業系列防貓網。此方案會針對網面扣件及滑軌進行補強，並加裝專用的「防開安全鎖」，防止聰明的貓咪自行撥開網窗。",
        "risk.medium.advice": "「多貓環境下，網面的磨損與受壓是呈倍數增長的。度尺師傅會現場評估您的家居設計和空間，為您制定一套具備『抗抓』及『高承重』的加固方案。」",
        "risk.high.assessment": "緊急預警！您的評估分數極高，屬於「極高風險類別」。這代表您的貓咪具備極強的破壞力或衝刺力（如暴衝習慣），或者您的窗戶結構已面臨老化風險。在這種情況下，低強度的防貓網絕對無法保障貓咪安全。",
        "risk.high.recommendation": "必須選用最高強度的 DF Pro 守護系列。此系列採用高強度不鏽鋼網身及強化鋁合金框架，專為高空、多貓及極度活躍的貓咪設計。",
        "risk.high.advice": "「作為專業的防貓網公司，我們必須坦誠告誡：您的情況若選用不當材料，極易發生意外。度尺師傅將以貓貓生命為大前提建議方案。如最終方案未能達到我們的安全標準，我們寧願拒絕接單，亦絕不拿貓咪生命冒險。」",

        # Webhook tier labels
        "webhook.tier.low": "穩定防護級別",
        "webhook.tier.medium": "高度關注級別",
        "webhook.tier.high": "極高風險/專業顧問級別",

        # Reference (1): breeds
        "ref.breeds.title": "參考資料（一）：貓種特徵分析",
        "ref.breeds.desc": "了解不同貓種的特性，有助於選擇最適合的防護方案",
        "ref.breeds.header.group": "類別",
        "ref.breeds.header.breeds": "代表品種",
        "ref.breeds.header.traits": "特徵",
        "ref.breeds.high": "高活力品種（需加強防護）",
        "ref.breeds.high.list": "孟加拉貓、阿比西尼亞貓、暹羅貓、東方短毛貓、德文捲毛貓",
        "ref.breeds.high.traits": "彈跳力強、好奇心重，經常試探網面及窗邊縫隙。",
        "ref.breeds.medium": "中等活力品種（建議加固）",
        "ref.breeds.medium.list": "美國短毛貓、緬因貓、挪威森林貓、蘇格蘭摺耳貓",
        "ref.breeds.medium.traits": "體型較重，活動量中等，但一旦跳躍衝擊力大。",
        "ref.breeds.low": "溫和品種（基本防護即可）",
        "ref.breeds.low.list": "波斯貓、布偶貓、英國短毛貓、異國短毛貓",
        "ref.breeds.low.traits": "性格文靜，多數只會在窗邊休息或觀望。",
        "ref.breeds.mixed": "唐貓 / 混種貓",
        "ref.breeds.mixed.list": "本地唐貓、各類混種貓",
        "ref.breeds.mixed.traits": "性格差異極大，應以實際行為評估。",
        "ref.breeds.note": "以上僅供參考，每隻貓咪都有獨特性格。無論品種如何，我們的度尺師傅會根據您家中貓咪的實際行為表現，制定最合適的防護方案。",

        # Reference (2): multi-cat
        "ref.multicat.title": "參考資料（二）：多貓飼養行為分析",
        "ref.multicat.desc": "貓咪數量會直接影響家居安全風險",
        "ref.multicat.single": "一隻貓飼養",
        "ref.multicat.single.desc": "貓咪行為較易預測，主要風險來自好奇心及窗邊狩獵本能。",
        "ref.multicat.double": "兩隻貓飼養",
        "ref.multicat.double.desc": "互相追逐玩耍的機會大增，網面承受連續衝擊的次數倍增。",
        "ref.multicat.multiple": "三隻或以上多貓飼養",
        "ref.multicat.multiple.desc": "容易出現地盤爭奪及集體暴衝，多隻貓同時撞網時衝擊力會疊加。",
        "ref.multicat.note": "無論飼養多少隻貓，都應預留「安全餘量」。我們的度尺師傅會評估您家中貓咪的互動模式，確保防護方案能應對最壞情況。",

        # Reference (3): impact
        "ref.impact.title": "參考資料（三）：物理實測對照",
        "ref.impact.desc": "以中型貓（體重中位數 4.5kg）為基準的衝擊力分析",
        "ref.impact.basis": "基準：中型貓體重中位數 4.5kg",
        "ref.impact.header.behavior": "行為狀態",
        "ref.impact.header.multiplier": "體重倍數",
        "ref.impact.header.impact": "等效衝擊力",
        "ref.impact.header.description": "說明",
        "ref.impact.static": "靜態站立 / 躺臥",
        "ref.impact.static.desc": "貓咪平靜地趴在網面上",
        "ref.impact.climb": "攀爬 / 跳躍落地",
        "ref.impact.climb.desc": "貓咪跳上窗台或從高處跳落網面",
        "ref.impact.rush": "全速衝撞",
        "ref.impact.rush.desc": "貓咪追逐獵物或受驚暴衝直撞網面",
        "ref.impact.scratch": "持續抓撓",
        "ref.impact.scratch.desc": "貓咪用爪抓網，產生集中點壓力",
        "ref.impact.extreme": "極端情況",
        "ref.impact.extreme.desc": "多貓同時衝撞時，衝擊力會疊加。兩隻4.5kg貓同時暴衝可產生超過100kg的瞬間衝擊力。",
        "ref.impact.wear": "抓撓損耗",
        "ref.impact.wear.desc": "持續抓撓會造成網面局部疲勞，長期累積可使網面強度下降30-50%。",
        "ref.impact.disclaimer": "以上數據基於中型貓體重中位數估算，實際衝擊力會因貓咪品種、體型及個體行為差異而有所不同，僅供參考。",
        "ref.impact.footer": "我們的專業團隊將會在預約時間準時上門，為您度身訂造「最安全」的守護方案。",
    },
    Locale.EN: {
        "hero.badge": "Pre-measurement Assessment",
        "hero.title": "DF Cat Home Safety Consultant Questionnaire",
        "hero.description": "Through this questionnaire we learn about your home and your cats' habits in advance, so we can bring the most suitable protection plan to the measurement visit.",
        "footer.copyright": "DF Creative Home - Hong Kong's Leading Cat Net Installer",
        "footer.tagline": "Your cat's lifetime guardian consultant",

        "stage.basic_info": "Basic Info",
        "stage.scored_questions": "Risk Assessment",
        "stage.confirmation": "Confirm",
        "stage.submitted": "Report",

        "field.address": "WhatsApp Number / Measurement Address",
        "field.building_type": "Property Type",
        "field.building_type.apartment": "Apartment",
        "field.building_type.house": "House/Villa",
        "field.floor_level": "Floor",
        "field.window_count": "Windows",
        "field.door_count": "Doors",
        "field.heaviest_cat_weight": "Heaviest Cat Weight",

        "question.cat_count.title": "1. Total number of cats at home?",
        "question.cat_count.opt1": "1 pt: 1 cat",
        "question.cat_count.opt2": "2 pts: 2 cats",
        "question.cat_count.opt3": "3 pts: 3 cats",
        "question.cat_count.opt4": "4 pts: 4 or more cats",
        "question.edge_behavior.title": "2. Your cats' behavior at the window?",
        "question.edge_behavior.opt0": "0 pts: Only sleeps by the window or watches from afar",
        "question.edge_behavior.opt1": "1 pt: Occasionally jumps onto the sill, never pushes or scratches the net",
        "question.edge_behavior.opt2": "2 pts: Often paws the window, pushes or bites the net edge",
        "question.edge_behavior.opt3": "3 pts: Has tried to escape, open a screen or push an old net",
        "question.structure.title": "3. Window structure and ventilation habits?",
        "question.structure.opt0": "0 pts: Windows not aged, only opened occasionally",
        "question.structure.opt1": "1 pt: Windows aged, only opened occasionally",
        "question.structure.opt2": "2 pts: Windows not aged, left open for long periods",
        "question.structure.opt3": "3 pts: Windows aged and left open for long periods",
        "question.personality.title": "4. Personality of your most active cat?",
        "question.personality.opt0": "0 pts: Quiet, elderly, dislikes jumping",
        "question.personality.opt1": "1 pt: Moderately active, likes resting on the cat tower",
        "question.personality.opt2": "2 pts: Extremely active, plays chase games and runs around",
        "question.personality.opt3": "3 pts: Has zoomies or cats fight and chase, may crash into windows at speed",
        "question.environment.title": "5. Any other high-risk factors at home?",
        "question.environment.opt0": "0 pts: None",
        "question.environment.opt1": "1 pt: Cat tower or cabinet next to a window gives direct access to the sill",
        "question.environment.opt2": "2 pts: Young children or large pets may push the net by accident",
        "question.environment.opt3": "3 pts: Both of the above",
        "question.expectation.title": "6. What do you expect from the cat net installation?",
        "question.expectation.opt0": "0 pts: Safe and solid, my cat's life comes first",
        "question.expectation.opt1": "1 pt: Safety matters, but I also want maximum light and good looks",
        "question.expectation.opt2": "2 pts: The most affordable option that keeps the cat in",
        "question.expectation.opt3": "3 pts: Visually invisible and as cheap as possible",

        "score.cat_count": "Number of Cats",
        "score.edge_behavior": "Window Behavior",
        "score.structure": "Window Structure",
        "score.personality": "Cat Personality",
        "score.environment": "High-risk Environment",
        "score.expectation": "Installation Expectation",
        "score.total": "Total Score",

        "notice.fill_all": "Please fill in all required fields",
        "notice.fill_all_desc": "All fields are required",
        "notice.complete_all": "Please complete all questions",
        "notice.complete_all_desc": "Please select an option for each question",
        "notice.success": "Submitted successfully!",
        "notice.success_desc": "Your assessment has been submitted. Our team will contact you soon.",
        "notice.error": "Submission failed",
        "notice.error_desc": "Please try again later or contact us",
        "notice.export_error": "Export failed",
        "notice.export_error_desc": "Please try again later",

        "unit.pieces": "pcs",
        "unit.kg": "Kg",
        "unit.points": "pts",

        "report.title": "Cat Home Safety Assessment Report",
        "report.date": "Assessment Date:",
        "report.tier.low": "[Safe & Stable Level]",
        "report.tier.medium": "[Enhanced Protection Level]",
        "report.tier.high": "[Extreme Risk Warning]",
        "report.assessment": "Assessment Result:",
        "report.recommendation": "DF Professional Recommendation:",
        "report.advice": "Safety Consultant's Note:",
        "report.basic_info": "Basic Information",
        "report.score_breakdown": "Score Breakdown",
        "report.thanks": "Thank you for completing the DF Cat Home Safety Consultant Questionnaire",
        "report.thanks_desc": "As Hong Kong's leading cat net installer, we believe our job is not just to install a net but to become your cat's lifetime guardian consultant.",
        "report.thanks_note": "Our team will arrive on time for your appointment to tailor the safest protection plan for your home.",

        "risk.low.assessment": "Based on your preliminary assessment, your home is low risk. Your cat is mild-tempered and your home is stable, so sudden impacts are relatively unlikely.",
        "risk.low.recommendation": "The DF Standard Series net covers everyday needs. Low risk never means careless: our measurement specialist will advise on style, position and installation to suit you and your cat.",
        "risk.low.advice": "\"Even a calm cat deserves a safe window. We make sure the installed net is flat and evenly tensioned for peace of mind.\"",
        "risk.medium.assessment": "Attention! Your assessment shows moderate risk. This usually comes with multi-cat households or lively cats that scratch or jump. Untested net structures may not stay stable under repeated impacts.",
        "risk.medium.recommendation": "We strongly recommend the DF Professional Series. It reinforces net fasteners and tracks and adds an anti-opening safety lock so clever cats cannot slide the net open.",
        "risk.medium.advice": "\"With several cats, wear and pressure on the net multiply. Our specialist will assess your layout on site and design a scratch-resistant, high-load reinforcement plan.\"",
        "risk.high.assessment": "Urgent warning! Your score is in the extreme risk category. Your cat shows strong destructive or sprinting power (such as zoomies), or your window structure is ageing. A low-strength net cannot keep your cat safe.",
        "risk.high.recommendation": "Only the highest-strength DF Pro Guardian Series is suitable. It uses high-tensile stainless steel mesh on a reinforced aluminium frame, built for high floors, multi-cat homes and very active cats.",
        "risk.high.advice": "\"As professionals we must be honest: with the wrong materials an accident is very likely. Our specialist will put your cat's life first. If the final plan cannot meet our safety standard, we would rather decline the job than risk your cat.\"",

        "webhook.tier.low": "Stable Protection Level",
        "webhook.tier.medium": "High Attention Level",
        "webhook.tier.high": "Extreme Risk / Consultant Level",

        "ref.breeds.title": "Reference (1): Cat Breed Analysis",
        "ref.breeds.desc": "Knowing your breed's traits helps choose the right protection",
        "ref.breeds.header.group": "Group",
        "ref.breeds.header.breeds": "Typical Breeds",
        "ref.breeds.header.traits": "Traits",
        "ref.breeds.high": "High energy (enhanced protection)",
        "ref.breeds.high.list": "Bengal, Abyssinian, Siamese, Oriental Shorthair, Devon Rex",
        "ref.breeds.high.traits": "Strong jumpers, very curious, often test nets and window gaps.",
        "ref.breeds.medium": "Medium energy (reinforcement advised)",
        "ref.breeds.medium.list": "American Shorthair, Maine Coon, Norwegian Forest Cat, Scottish Fold",
        "ref.breeds.medium.traits": "Heavier bodies, moderate activity, large impact when they do jump.",
        "ref.breeds.low": "Gentle (basic protection)",
        "ref.breeds.low.list": "Persian, Ragdoll, British Shorthair, Exotic Shorthair",
        "ref.breeds.low.traits": "Calm, mostly rest or watch by the window.",
        "ref.breeds.mixed": "Domestic / mixed breed",
        "ref.breeds.mixed.list": "Local domestic cats, all mixed breeds",
        "ref.breeds.mixed.traits": "Personality varies widely; judge by observed behavior.",
        "ref.breeds.note": "For reference only. Every cat is an individual. Whatever the breed, our specialist plans protection around how your cats actually behave.",

        "ref.multicat.title": "Reference (2): Multi-Cat Behavior Analysis",
        "ref.multicat.desc": "The number of cats directly affects home safety risk",
        "ref.multicat.single": "Single cat household",
        "ref.multicat.single.desc": "Behavior is easier to predict; the main risks are curiosity and hunting instinct at the window.",
        "ref.multicat.double": "Two cat household",
        "ref.multicat.double.desc": "Chasing and play increase sharply, multiplying the repeated impacts the net must absorb.",
        "ref.multicat.multiple": "Three or more cats",
        "ref.multicat.multiple.desc": "Territory disputes and group zoomies are common; impacts add up when several cats hit the net together.",
        "ref.multicat.note": "However many cats you keep, leave a safety margin. Our specialist reviews how your cats interact so the plan can handle the worst case.",

        "ref.impact.title": "Reference (3): Physical Impact Analysis",
        "ref.impact.desc": "Impact force analysis based on a medium-sized cat (median weight 4.5kg)",
        "ref.impact.basis": "Basis: medium cat median weight 4.5kg",
        "ref.impact.header.behavior": "Behavior",
        "ref.impact.header.multiplier": "Weight Multiplier",
        "ref.impact.header.impact": "Equivalent Force",
        "ref.impact.header.description": "Description",
        "ref.impact.static": "Standing / lying",
        "ref.impact.static.desc": "Cat resting calmly against the net",
        "ref.impact.climb": "Climbing / landing",
        "ref.impact.climb.desc": "Cat jumps onto the sill or lands on the net from height",
        "ref.impact.rush": "Full-speed collision",
        "ref.impact.rush.desc": "Cat chasing prey or startled, running straight into the net",
        "ref.impact.scratch": "Sustained scratching",
        "ref.impact.scratch.desc": "Claws on the net create concentrated point pressure",
        "ref.impact.extreme": "Extreme case",
        "ref.impact.extreme.desc": "When several cats collide at once the forces add up. Two 4.5kg cats with zoomies can exceed 100kg of instantaneous impact.",
        "ref.impact.wear": "Scratch wear",
        "ref.impact.wear.desc": "Sustained scratching fatigues the mesh locally and can cut net strength by 30-50% over time.",
        "ref.impact.disclaimer": "Figures are estimates based on the median weight of a medium cat. Actual forces vary with breed, size and individual behavior. For reference only.",
        "ref.impact.footer": "Our team will arrive on time for your appointment to tailor the safest protection plan for your home.",
    },
}


_REPORTED_MISSES: Set[Tuple[str, str]] = set()


def parse_locale(value: str) -> Locale:
    """
    Parse a locale code such as "zh", "EN" or "zh-HK".

    Raises ValueError for anything outside the two supported locales.
    """
    code = (value or "").strip().lower().split("-")[0].split("_")[0]
    return Locale(code)


def translate(locale: Locale, key: str) -> str:
    """Look up key in the locale table, returning the key itself on a miss."""
    table = TRANSLATIONS.get(Locale(locale), {})
    if key in table:
        return table[key]

    miss = (Locale(locale).value, key)
    if miss not in _REPORTED_MISSES:
        _REPORTED_MISSES.add(miss)
        print(f"[I18N][MISS] No '{miss[0]}' text for key '{key}' - showing key")
    return key


class Translator:
    """Lookup bound to one locale, handed to the composer and exporter."""

    def __init__(self, locale: Locale = DEFAULT_LOCALE):
        self.locale = Locale(locale)

    def t(self, key: str) -> str:
        return translate(self.locale, key)

    def __repr__(self) -> str:
        return f"Translator({self.locale.value!r})"
