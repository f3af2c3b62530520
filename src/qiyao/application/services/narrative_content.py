OPPORTUNITY_DELIMITER = "|||"

# Inspiration seeds for chance encounters on the road. Each lists the arbiter's suggested choices.
OPPORTUNITY_SCENARIOS = (
    "The sealed letter on Wild Goose Slope (clear noon; a wax-sealed letter lies in the grass and a young lord rides up demanding it. Choices: demand a reward / probe his story / return it freely)",
    "Plotters in the ruined mountain temple (stormy night; men in black whisper about a sect treasure behind a thin wall. Choices: ambush / eavesdrop / step out and cow them)",
    "Bones beneath the cliff (a misstep in the fog reveals a weathered skeleton clutching a torn sword manual. Choices: take the manual / bury the dead / search for a mechanism)",
    "The snipe and the clam (two masters lie dead in a valley beside a glowing relic. Choices: seize it / tend the dying / wait for others to fight)",
    "The nameless swordsman's gift (a ragged swordsman offers an old sword tassel. Choices: accept / refuse / ask why)",
    "Drunken talk at a black inn (snowy night; a drunk at the next table boasts of a tomb full of gold. Choices: ply him with wine / ignore him / tail him)",
    "Driftwood in the rapids (after the flood a foreign corpse is lashed to a floating log. Choices: haul it in / watch from afar / report to the magistrate)",
    "The game under the old locust tree (an unattended go board; moving a stone springs a mechanism. Choices: solve it / smash it / lie in wait)",
    "The weeping orphan (a child cries before a ruin, clutching a metal shard. Choices: take the child in / question the child / walk on)",
    "The gambling den's master stroke (an old man beats the house with uncanny skill and leaves sighing. Choices: seek tutelage / escort him / challenge him)",
    "The bloodied kasaya (a monk who died in meditation entrusts a bloodstained robe. Choices: deliver it / keep it / destroy it)",
    "A flute under the moon (a lone grave in a deserted village, a mournful flute in the dark. Choices: play along / dig up the grave / drive off the spirit)",
    "The dusty blade at the pawnshop (a rusted saber in the corner hums in answer to inner strength. Choices: buy it / take it / test the owner)",
    "The storyteller's tale (a teahouse storyteller recounts secrets of the fallen dynasty. Choices: tip him / blackmail him / guard him in secret)",
    "The poisoned hawk (a messenger hawk falls with a warning tied to its leg. Choices: intercept / heal and release / forge a reply)",
    "The secret of the well (a chained skeleton lies at the bottom of a dry well. Choices: unlock it / seal the well / perform last rites)",
    "Music from the pleasure boat (an empty painted boat on the river, beautiful zither music inviting guests. Choices: board / snap the strings with inner force / dive beneath)",
    "The wolves' fear (a wolf pack surrounds the camp and then scatters as a stranger steps from the shadows. Choices: fight / trade / ally)",
    "The tofu maker's kung fu (an old tofu seller lifts a thousand-jin millstone with one hand. Choices: spar / steal his technique / buy tofu)",
)

FALLBACK_MOVE_TEXT = "Mist hangs over the road; the heavens reveal nothing of what lies ahead."
FALLBACK_MOVE_SUMMARY = "Pressing on"
FALLBACK_CONFLICT_TEXT = "Two sects meet on a narrow road; hands drift toward hilts."
FALLBACK_OPPORTUNITY_TITLE = "A Twist of Fate"
FALLBACK_OPPORTUNITY_NOTES = "The arbiter rules as they see fit."
