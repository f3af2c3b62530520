# Generated route table: one waypoint per li from the Qiyao Palace (0) to the Yunmeng Marsh (120).
from qiyao.domain.models.location import Location


_ROUTE_ROWS = (
    ("Qiyao Palace", "Seven banners snap above the palace gate where the sects muster."),
    ("Stone Stele Crossroads", "A weathered stele lists the names of those who never returned."),
    ("Willow Ferry", "A flat-bottomed ferry creaks across a slow green river."),
    ("Apricot Blossom Village", "Farmers bar their doors as armed riders pass."),
    ("Old Post Road", "Rutted tracks worn deep by a century of couriers."),
    ("Red Dust Inn", "Wine is cheap and every table listens to its neighbour."),
    ("Mulberry Slope", "Silkworm sheds line the hillside in tidy rows."),
    ("Broken Bridge", "Half a stone arch juts over the gorge; the rest lies below."),
    ("Grey Heron Marsh", "Reeds taller than a rider hide narrow causeways."),
    ("Lone Pine Pass", "A single crooked pine marks the top of the climb."),
    ("Tea Horse Station", "Caravans trade brick tea for mountain ponies."),
    ("Cold Spring Temple", "Monks draw icy water that never freezes."),
    ("Jade Screen Cliff", "Polished rock faces shine green after rain."),
    ("Wolf Howl Ridge", "Hunters say the packs here follow travellers for days."),
    ("Lantern Market", "A night market that moves to a new field every month."),
    ("Ironwood Forest", "Trees so hard that woodcutters break their axes."),
    ("Black Ox Ford", "Shallow water over slick black stones."),
    ("Yellow Crane Tower", "Poets carve verses into every pillar."),
    ("Plum Rain Garden", "An abandoned estate where the plum trees still fruit."),
    ("Nine Bends Stream", "The water doubles back on itself nine times."),
    ("Hermit's Cave", "Ashes of a recent fire lie inside the cave mouth."),
    ("Scholar's Rest Pavilion", "Examination candidates once rested here on their way to the capital."),
    ("Copper Bell Monastery", "Its great bell can be heard three valleys away."),
    ("Salt Merchant's Quay", "Guards in matching coats watch the salt barges."),
    ("Fallen Star Crater", "A round hollow where nothing grows."),
    ("Cypress Tombs", "Rows of stone officials guard a forgotten dynasty."),
    ("Misty Bamboo Grove", "The bamboo rustles even when the air is still."),
    ("White Egret Sandbar", "Birds lift from the shallows in white clouds."),
    ("Thunder Gorge", "The river roars so loudly that speech is useless."),
    ("Tiger Leap Rocks", "Boulders spaced just far enough apart to tempt a jump."),
    ("Peach Spring Hamlet", "Villagers claim no stranger has found the way twice."),
    ("Eastern Watchtower", "A garrison post manned by two bored archers."),
    ("Reed Flute Harbour", "Fishermen play reed flutes to call their boats home."),
    ("Golden Millet Fields", "Harvest carts block the narrow lanes."),
    ("Serpent Coil Path", "The path winds so tightly that riders must dismount."),
    ("Moonlit Well", "A well whose water reflects the moon even at noon."),
    ("Guanyin Shrine", "Incense smoke drifts from a tiny roadside shrine."),
    ("Crimson Maple Valley", "Leaves the colour of fresh blood carpet the ground."),
    ("Swordsmith's Forge", "The hammering never stops, day or night."),
    ("Autumn Wind Bluff", "A high bluff where the wind carries voices far."),
    ("Ancient Battlefield", "Rusted arrowheads still surface after every rain."),
    ("Heaven's Ladder Steps", "Three thousand stone steps cut into the mountain."),
    ("Cloudgate Monastery", "Clouds pour through the gate like a slow tide."),
    ("Eagle Nest Fort", "A bandit fort half hidden in the cliff."),
    ("Singing Sand Dunes", "The dunes hum when the wind shifts."),
    ("Oasis of Green Jade", "Palm trees ring a pool of startling colour."),
    ("Camel Bone Pass", "Bleached bones mark the safe trail."),
    ("Ghost Town of Liang", "Empty streets and doors left swinging."),
    ("Stone Forest", "Pillars of grey rock crowd together like an army."),
    ("Hidden Dragon Lake", "Locals refuse to fish here after dusk."),
    ("Halfway Pavilion", "A painted pavilion marking half the road to the marsh."),
    ("Drunken Immortal Tavern", "The owner claims an immortal once lost a wager here."),
    ("Silver Thread Falls", "A waterfall so thin it looks like spun silver."),
    ("Iron Chain Bridge", "Thirteen chains span the river, planks laid loose on top."),
    ("Prefecture Walls", "Magistrate's soldiers question every armed traveller."),
    ("Pearl River Docks", "Boats from the southern sea crowd the wharves."),
    ("Blue Lotus Pond", "Lotus flowers bloom out of season."),
    ("Thousand Buddha Grottoes", "Carved figures fill the cliff from floor to summit."),
    ("Frost Peak Trail", "Snow lingers on the trail even in summer."),
    ("Bitter Bamboo Ridge", "A ridge of yellowed bamboo and thin soil."),
    ("Withered Vine Manor", "A noble house gone to ruin; vines strangle the gates."),
    ("Falcon Cliff", "Falconers train their birds on the updrafts."),
    ("Sunken Temple", "Only the roof of the temple rises above the lake."),
    ("Phoenix Terrace", "An old altar where emperors once made offerings."),
    ("Long River Levee", "A raised dyke stretching beyond sight."),
    ("Broken Halberd Gate", "A fortress gate with a halberd lodged in its beam."),
    ("Rain Curtain Cave", "A cave behind a sheet of falling water."),
    ("Ox Horn Hills", "Twin hills shaped like the horns of an ox."),
    ("Purple Cloud Abbey", "Daoist nuns tend herb gardens on terraces."),
    ("Wind Chime Market", "Thousands of chimes sound from every stall."),
    ("Hundred Flowers Valley", "Bees drone over endless blossoms."),
    ("Slate Roof Town", "Grey roofs climb the hillside in tight steps."),
    ("Whispering Pines", "The pines seem to murmur names."),
    ("Dragon Bone Quarry", "Workers dig up enormous ancient bones."),
    ("Lotus Moon Bridge", "A round bridge that mirrors itself into a full circle."),
    ("Still Water Hermitage", "A recluse teaches that stillness defeats speed."),
    ("Red Cliff", "Iron-red rock towers over the river."),
    ("Weeping Willow Embankment", "Willows trail their branches in the current."),
    ("Tortoise Shell Isle", "A river island shaped like a turtle's back."),
    ("Burning Sky Plateau", "The plateau glows orange at sunset."),
    ("Mountain Gate of Wudang", "Pilgrims queue to pass the sacred gate."),
    ("Sword Washing Pool", "Swordsmen once cleaned their blades here after duels."),
    ("Crow Roost Woods", "Crows gather by the thousand at dusk."),
    ("Lost Caravan Canyon", "Wheel ruts end abruptly at the canyon wall."),
    ("Magistrate's Granary", "Sealed storehouses guarded by tired militia."),
    ("Sleeping Buddha Hill", "The ridge line resembles a reclining Buddha."),
    ("Cinnabar Mine", "Red dust stains the miners from head to toe."),
    ("Twin Dragon Bridge", "Two bridges cross side by side; locals use only one."),
    ("Jasper Mountain Hut", "A shelter stocked by unseen hands."),
    ("Seven Stars Shoal", "Seven rocks break the surface in the shape of the Dipper."),
    ("Chrysanthemum Terrace", "Late flowers nod along the terrace walls."),
    ("Bronze Mirror Lake", "Calm water that reflects like polished bronze."),
    ("Mourning Dove Crossing", "Doves call mournfully from the ferry posts."),
    ("Gale Ridge", "Wind strong enough to unhorse a rider."),
    ("Riverside Teahouse", "Storytellers compete for coins by the window seats."),
    ("Skull Rock", "A boulder with two hollow eye sockets."),
    ("Nightshade Glen", "Dark flowers and darker rumours."),
    ("Pagoda of Nine Tiers", "Each tier holds a different guardian statue."),
    ("Azure Dragon Ferry", "A painted dragon prow leads the crossing."),
    ("Smuggler's Cove", "Lanterns flicker in the cove after midnight."),
    ("Hall of Heroes", "Tablets honour martial masters of past ages."),
    ("Great Wall Ruins", "Crumbling ramparts snake across the hills."),
    ("Border Beacon Tower", "Soldiers keep a pile of wolf dung ready to light."),
    ("Last Village", "The final village before the marshlands."),
    ("Rotting Pier", "Planks sag into the water at every step."),
    ("Marsh Gate", "Two carved stones mark the edge of the great marsh."),
    ("Heron Bones Shallows", "White bones glint beneath the shallow water."),
    ("Misty Causeway", "A narrow raised path lost in fog."),
    ("Will-o'-Wisp Fen", "Pale lights drift over the black water."),
    ("Floating Reed Isles", "Islands of woven reed that shift underfoot."),
    ("Drowned Shrine", "A shrine half swallowed by mud."),
    ("Cormorant Rocks", "Fishermen's birds dive between the stones."),
    ("Silent Lagoon", "No bird sings and no fish rises."),
    ("Mud Dragon Hollow", "A sinkhole that breathes warm air."),
    ("Eel Fisher's Hut", "An old eel fisher sells directions for silver."),
    ("Jade Mist Channel", "Green fog hangs low over a winding channel."),
    ("Ghost Ship Wreck", "A warship rots in the reeds, its banners long gone."),
    ("Tomb of the Dragon King", "A sealed tomb rising out of the marsh."),
    ("Inner Lake Shore", "The water opens wide beneath a grey sky."),
    ("Nilin Altar Steps", "Broken steps climb toward a ring of standing stones."),
    ("Yunmeng Marsh", "The heart of the marsh, where the Nilin blade awaits."),
)


ROUTE_LOCATIONS = tuple(
    Location(index=index, name=name, description=description) for index, (name, description) in enumerate(_ROUTE_ROWS)
)
